from fastapi import APIRouter, Depends

from dependencies import get_account_api
from documents.public_api import AccountPublicApi
from exceptions import NotFoundError
from schemas import ApiResponse
from utils.error_handlers import handle_api_errors

router = APIRouter()


@router.get("/accounts/{account_id}", response_model=ApiResponse)
@handle_api_errors("Get account")
def get_account(account_id: int, api: AccountPublicApi = Depends(get_account_api)):
    """Account with user count, document count and storage usage."""
    summary = api.summary(account_id)
    if summary is None:
        raise NotFoundError("Account", account_id)
    return ApiResponse(data=summary.model_dump())


@router.get("/accounts/{account_id}/users", response_model=ApiResponse)
@handle_api_errors("Get account users")
def get_account_users(account_id: int, api: AccountPublicApi = Depends(get_account_api)):
    if not api.exists(id=account_id):
        raise NotFoundError("Account", account_id)
    users = api.users(account_id)
    return ApiResponse(data=[user.to_dict() for user in users], meta={"total_count": len(users)})
