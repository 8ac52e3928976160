"""
User management module.

Other modules talk to users only through UserPublicApi and receive UserDto
instances. Related accounts and documents are resolved by
user_management.relations.UserRelations (imported explicitly, it depends on
the documents module).
"""

from .dto import UserDto
from .public_api import UserPublicApi

__all__ = ["UserDto", "UserPublicApi"]
