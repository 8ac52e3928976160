from fastapi import APIRouter, Depends, Query
from typing import Optional

from constants import DocumentStatus, UserRole
from dependencies import get_user_api, get_user_relations
from exceptions import NotFoundError
from schemas import ApiResponse
from user_management.public_api import UserPublicApi
from user_management.relations import UserRelations
from utils.error_handlers import handle_api_errors

router = APIRouter()


@router.get("/users", response_model=ApiResponse)
@handle_api_errors("List users")
def list_users(
    role: Optional[UserRole] = Query(None),
    account_id: Optional[int] = Query(None),
    api: UserPublicApi = Depends(get_user_api)
):
    """Users, optionally filtered by role and/or account."""
    predicate = {}
    if role:
        predicate["role"] = role
    if account_id is not None:
        predicate["account_id"] = account_id

    users = api.where(**predicate) if predicate else api.all()
    return ApiResponse(data=[user.to_dict() for user in users], meta={"total_count": len(users)})


@router.get("/users/{user_id}", response_model=ApiResponse)
@handle_api_errors("Get user")
def get_user(
    user_id: int,
    api: UserPublicApi = Depends(get_user_api),
    relations: UserRelations = Depends(get_user_relations)
):
    """User with their account summary attached."""
    user = api.find(user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    account = relations.account_summary_for(user)
    data = user.to_dict()
    data["account"] = account.model_dump() if account else None
    return ApiResponse(data=data)


@router.get("/users/{user_id}/documents", response_model=ApiResponse)
@handle_api_errors("Get user documents")
def get_user_documents(
    user_id: int,
    status: Optional[DocumentStatus] = Query(None),
    api: UserPublicApi = Depends(get_user_api),
    relations: UserRelations = Depends(get_user_relations)
):
    user = api.find(user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    documents = relations.documents_for(user, status=status)
    return ApiResponse(data=[document.to_dict() for document in documents], meta={"total_count": len(documents)})
