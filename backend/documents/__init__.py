"""
Main-application module: accounts and documents.
"""

from .dto import AccountDto, DocumentDto
from .public_api import AccountPublicApi, DocumentPublicApi, DocumentPage

__all__ = ["AccountDto", "DocumentDto", "AccountPublicApi", "DocumentPublicApi", "DocumentPage"]
