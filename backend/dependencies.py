"""
Dependency injection providers for FastAPI.

Each provider builds a gateway bound to the request's database session, so
routers never construct gateways (or touch models) themselves.
"""

from sqlalchemy.orm import Session
from fastapi import Depends
from database import get_db
from documents.public_api import AccountPublicApi, DocumentPublicApi
from user_management.public_api import UserPublicApi
from user_management.relations import UserRelations


def get_user_api(db: Session = Depends(get_db)) -> UserPublicApi:
    return UserPublicApi(db)


def get_account_api(db: Session = Depends(get_db)) -> AccountPublicApi:
    return AccountPublicApi(db)


def get_document_api(db: Session = Depends(get_db)) -> DocumentPublicApi:
    return DocumentPublicApi(db)


def get_user_relations(db: Session = Depends(get_db)) -> UserRelations:
    """
    Factory for UserRelations.

    Args:
        db: Database session (injected)

    Returns:
        UserRelations bound to the same session as the other gateways
    """
    return UserRelations(db)
