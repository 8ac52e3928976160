from fastapi import APIRouter, Depends, Query
from typing import Optional
import math

from constants import DocumentStatus, HTTPStatus, Pagination
from dependencies import get_document_api
from documents.public_api import DocumentPublicApi
from exceptions import NotFoundError
from schemas import ApiResponse, DocumentCreate, DocumentUpdate, PaginationMeta
from utils.error_handlers import handle_api_errors

router = APIRouter()


@router.get("/documents", response_model=ApiResponse)
@handle_api_errors("List documents")
def list_documents(
    page: int = Query(1, ge=1),
    per_page: int = Query(Pagination.DEFAULT_PER_PAGE, ge=1),
    q: Optional[str] = Query(None, description="Case-insensitive match on title or content; '*' matches all"),
    status: Optional[DocumentStatus] = Query(None),
    sort_by: str = Query("created_at"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    api: DocumentPublicApi = Depends(get_document_api)
):
    """
    Paginated document list.

    per_page is capped at Pagination.MAX_PER_PAGE.
    """
    per_page = min(per_page, Pagination.MAX_PER_PAGE)
    result = api.search(
        text=q,
        status=status,
        limit=per_page,
        offset=(page - 1) * per_page,
        sort_by=sort_by,
        order=order
    )
    meta = PaginationMeta(
        total_count=result.total,
        current_page=page,
        per_page=per_page,
        total_pages=math.ceil(result.total / per_page)
    )
    return ApiResponse(data=[document.to_dict() for document in result.documents], meta=meta.model_dump())


@router.get("/documents/{document_id}", response_model=ApiResponse)
@handle_api_errors("Get document")
def get_document(document_id: int, api: DocumentPublicApi = Depends(get_document_api)):
    document = api.find(document_id)
    if document is None:
        raise NotFoundError("Document", document_id)
    return ApiResponse(data=document.to_dict())


@router.post("/documents", response_model=ApiResponse, status_code=HTTPStatus.CREATED)
@handle_api_errors("Create document")
def create_document(body: DocumentCreate, api: DocumentPublicApi = Depends(get_document_api)):
    document = api.create_or_raise(**body.model_dump(exclude_none=True))
    return ApiResponse(data=document.to_dict())


@router.patch("/documents/{document_id}", response_model=ApiResponse)
@handle_api_errors("Update document")
def update_document(
    document_id: int,
    body: DocumentUpdate,
    api: DocumentPublicApi = Depends(get_document_api)
):
    """Update the given fields; omitted fields are left unchanged."""
    document = api.update_or_raise(document_id, **body.model_dump(exclude_none=True))
    return ApiResponse(data=document.to_dict())


@router.delete("/documents/{document_id}", response_model=ApiResponse)
@handle_api_errors("Delete document")
def delete_document(document_id: int, api: DocumentPublicApi = Depends(get_document_api)):
    api.delete_or_raise(document_id)
    return ApiResponse(data={"id": document_id, "deleted": True})
