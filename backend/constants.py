"""
Application-wide constants.

This module centralizes the enum values and limits used by the models,
gateways and API routers.
"""
from enum import Enum


class UserRole(str, Enum):
    """
    Roles a user can hold within an account.

    - GUEST / MEMBER are regular users
    - ADMIN / SUPER_ADMIN are administrators
    """

    GUEST = 'guest'
    MEMBER = 'member'
    ADMIN = 'admin'
    SUPER_ADMIN = 'super_admin'

    @classmethod
    def administrators(cls) -> list['UserRole']:
        return [cls.ADMIN, cls.SUPER_ADMIN]

    @classmethod
    def regular(cls) -> list['UserRole']:
        return [cls.GUEST, cls.MEMBER]


class DocumentStatus(str, Enum):
    """Lifecycle of an uploaded document"""

    UPLOADED = 'uploaded'
    REVIEWED = 'reviewed'
    SIGNED = 'signed'
    ARCHIVED = 'archived'


class Pagination:
    """Pagination limits for list endpoints"""

    DEFAULT_PER_PAGE = 20
    MAX_PER_PAGE = 100


class ServerConfig:
    """Server configuration constants"""

    HOST = "0.0.0.0"
    PORT = 8888


class HTTPStatus:
    """HTTP status codes used throughout the application"""

    # Success
    CREATED = 201

    # Client Errors
    BAD_REQUEST = 400
    NOT_FOUND = 404
    UNPROCESSABLE_ENTITY = 422

    # Server Errors
    INTERNAL_SERVER_ERROR = 500
