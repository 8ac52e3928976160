"""
Related data for users, fetched through the main application's gateways.

Users do not hold ORM relationships to accounts or documents from this
module's point of view; every lookup goes through a PublicApi.
"""

from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from constants import DocumentStatus
from documents.dto import AccountDto, DocumentDto
from documents.public_api import AccountPublicApi, DocumentPublicApi
from schemas import AccountSummary
from .dto import UserDto


class UserRelations:
    """Account and document lookups for a UserDto."""

    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountPublicApi(db)
        self.documents = DocumentPublicApi(db)

    def account_for(self, user: UserDto) -> Optional[AccountDto]:
        if user.account_id is None:
            return None
        return self.accounts.find(user.account_id)

    def account_summary_for(self, user: UserDto) -> Optional[AccountSummary]:
        """Account of the user with its user/document/storage aggregates."""
        if user.account_id is None:
            return None
        return self.accounts.summary(user.account_id)

    def documents_for(self, user: UserDto, status: Optional[DocumentStatus] = None) -> List[DocumentDto]:
        return self.documents.documents_for_user(user.id, status=status)

    def documents_count_for(self, user: UserDto, status: Optional[DocumentStatus] = None) -> int:
        return self.documents.count_for_user(user.id, status=status)

    def documents_by_status(self, user: UserDto) -> Dict[str, List[DocumentDto]]:
        return {
            status.value: self.documents_for(user, status=status)
            for status in DocumentStatus
        }
