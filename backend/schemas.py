from pydantic import BaseModel, Field
from typing import Optional, Any, Dict
from datetime import datetime

from constants import UserRole, DocumentStatus

# A value is "present" when it contains at least one non-whitespace character
PRESENT = r"\S"


# Record schemas: validation rules applied by the gateways before saving
class AccountRecord(BaseModel):
    name: str = Field(pattern=PRESENT)


class UserRecord(BaseModel):
    email: str = Field(pattern=PRESENT)
    first_name: str = Field(pattern=PRESENT)
    last_name: str = Field(pattern=PRESENT)
    account_id: Optional[int] = None
    role: UserRole = UserRole.GUEST


class DocumentRecord(BaseModel):
    title: str = Field(pattern=PRESENT)
    content: Optional[str] = None
    user_id: int
    status: DocumentStatus = DocumentStatus.UPLOADED
    storage_bytes: int = Field(0, ge=0)


# Request schemas
class DocumentCreate(BaseModel):
    """Body for POST /documents"""
    title: str
    user_id: int
    content: Optional[str] = None
    status: Optional[DocumentStatus] = None


class DocumentUpdate(BaseModel):
    """Body for PATCH /documents/{id}; omitted fields are left unchanged"""
    title: Optional[str] = None
    content: Optional[str] = None
    status: Optional[DocumentStatus] = None


# Response schemas
class AccountSummary(BaseModel):
    """Account with the aggregates the user-facing pages show"""
    id: int
    name: str
    users_count: int
    documents_count: int
    total_storage_bytes: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaginationMeta(BaseModel):
    total_count: int
    current_page: int
    per_page: int
    total_pages: int


class ApiResponse(BaseModel):
    """Envelope used by every /api/v1 endpoint"""
    success: bool = True
    data: Any = None
    meta: Dict[str, Any] = Field(default_factory=dict)
