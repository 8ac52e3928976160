"""
User gateway: the only way other modules read or write users.
"""

from typing import Any, List, Optional

from constants import UserRole
from public_api.base import PublicApi
from schemas import UserRecord
from .dto import UserDto


class UserPublicApi(PublicApi[UserDto]):
    """Gateway for users."""

    # String reference keeps models out of the import graph until first use
    model_class = "models.User"
    dto_class = UserDto
    record_schema = UserRecord
    unique_fields = ("email",)

    def get_all_by_account_id(self, account_id: int) -> List[UserDto]:
        return self.where(account_id=account_id)

    def find_by_email(self, email: str) -> Optional[UserDto]:
        return self.find_by(email=email)

    def administrators(self) -> List[UserDto]:
        return self.query(lambda _: self.model.administrators().order_by(self.model.id))

    def regular_users(self) -> List[UserDto]:
        return self.query(lambda _: self.model.regular_users().order_by(self.model.id))

    def with_role(self, role: UserRole) -> List[UserDto]:
        return self.where(role=role)

    def count_by_account(self, account_id: int) -> int:
        return self.count_where(account_id=account_id)

    def pluck_by_account_id(self, account_id: int, *fields: str) -> List[Any]:
        """
        Raw column values for the users of an account (no DTOs).

        Example:
            api.pluck_by_account_id(7, "id")            -> [1, 2, 3]
            api.pluck_by_account_id(7, "id", "email")   -> [(1, "a@x.com"), ...]
        """
        return self.pluck_where({"account_id": account_id}, *fields)
