"""
Account and Document gateways for the main application.

Account aggregates (users, documents, storage) are computed through the
gateways rather than ORM relationships, so the account side never touches
the users table directly.
"""

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, or_, select

from constants import DocumentStatus
from public_api.base import PublicApi
from schemas import AccountRecord, AccountSummary, DocumentRecord
from user_management.dto import UserDto
from user_management.public_api import UserPublicApi
from .dto import AccountDto, DocumentDto

SORTABLE_FIELDS = ("id", "title", "status", "storage_bytes", "created_at", "updated_at")


def _escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass
class DocumentPage:
    """One page of search results plus the total number of matches."""

    documents: List[DocumentDto]
    total: int


class DocumentPublicApi(PublicApi[DocumentDto]):
    """Gateway for documents."""

    model_class = "models.Document"
    dto_class = DocumentDto
    record_schema = DocumentRecord

    def documents_for_user(self, user_id: int, status: Optional[DocumentStatus] = None) -> List[DocumentDto]:
        """
        Documents owned by a user, optionally filtered by status.
        """
        if status:
            return self.where(user_id=user_id, status=status)
        return self.where(user_id=user_id)

    def count_for_user(self, user_id: int, status: Optional[DocumentStatus] = None) -> int:
        if status:
            return self.count_where(user_id=user_id, status=status)
        return self.count_where(user_id=user_id)

    def _search_conditions(self, text: Optional[str], status: Optional[DocumentStatus]) -> list:
        conditions = []
        if text and text != '*':
            like = f"%{_escape_like(text.lower())}%"
            conditions.append(or_(
                func.lower(self.model.title).like(like, escape="\\"),
                func.lower(self.model.content).like(like, escape="\\")
            ))
        if status:
            conditions.extend(self._conditions({"status": status}))
        return conditions

    def search(
        self,
        text: Optional[str] = None,
        status: Optional[DocumentStatus] = None,
        limit: int = 20,
        offset: int = 0,
        sort_by: str = "created_at",
        order: str = "desc"
    ) -> DocumentPage:
        """
        Case-insensitive title/content search with pagination.

        Args:
            text: Substring to look for; None or "*" matches everything
            status: Optional status filter
            limit: Page size
            offset: Number of matches to skip
            sort_by: One of SORTABLE_FIELDS (unknown values fall back to created_at)
            order: "asc" or "desc"

        Returns:
            DocumentPage with the DTOs of this page and the total match count
        """
        conditions = self._search_conditions(text, status)

        column = getattr(self.model, sort_by if sort_by in SORTABLE_FIELDS else "created_at")
        ordering = column.asc() if order == "asc" else column.desc()

        documents = self.query(
            lambda q: q.where(*conditions).order_by(ordering, self.model.id).limit(limit).offset(offset)
        )
        total = self.db.scalar(
            select(func.count()).select_from(self.model).where(*conditions)
        )
        return DocumentPage(documents=documents, total=total)

    def total_storage_bytes_for_users(self, user_ids: List[int]) -> int:
        if not user_ids:
            return 0
        stmt = select(func.coalesce(func.sum(self.model.storage_bytes), 0)).where(
            *self._conditions({"user_id": user_ids})
        )
        return int(self.db.scalar(stmt))


class AccountPublicApi(PublicApi[AccountDto]):
    """Gateway for accounts."""

    model_class = "models.Account"
    dto_class = AccountDto
    record_schema = AccountRecord

    def _users_api(self) -> UserPublicApi:
        return UserPublicApi(self.db, autocommit=self.autocommit)

    def _documents_api(self) -> DocumentPublicApi:
        return DocumentPublicApi(self.db, autocommit=self.autocommit)

    def _user_ids(self, account_id: int) -> List[int]:
        return self._users_api().pluck_by_account_id(account_id, "id")

    def users(self, account_id: int) -> List[UserDto]:
        return self._users_api().get_all_by_account_id(account_id)

    def users_count(self, account_id: int) -> int:
        return self._users_api().count_by_account(account_id)

    def documents(self, account_id: int) -> List[DocumentDto]:
        user_ids = self._user_ids(account_id)
        if not user_ids:
            return []
        return self._documents_api().where(user_id=user_ids)

    def documents_count(self, account_id: int) -> int:
        user_ids = self._user_ids(account_id)
        if not user_ids:
            return 0
        return self._documents_api().count_where(user_id=user_ids)

    def total_storage_bytes(self, account_id: int) -> int:
        return self._documents_api().total_storage_bytes_for_users(self._user_ids(account_id))

    def summary(self, account_id: int) -> Optional[AccountSummary]:
        """
        Account with user/document/storage aggregates, or None if absent.
        """
        account = self.find(account_id)
        if account is None:
            return None

        return AccountSummary(
            id=account.id,
            name=account.name,
            users_count=self.users_count(account_id),
            documents_count=self.documents_count(account_id),
            total_storage_bytes=self.total_storage_bytes(account_id),
            created_at=account.created_at,
            updated_at=account.updated_at
        )
