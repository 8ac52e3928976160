"""
Error handling decorators for API endpoints.

Translates the application's exceptions into HTTPException responses so each
endpoint only deals with the happy path.
"""

from functools import wraps
from typing import Callable
from fastapi import HTTPException
import inspect
import logging

from constants import HTTPStatus
from exceptions import (
    ApplicationError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_detail(message: str, details: list[str] | None = None) -> dict:
    """Body used for every error response: {"message": ..., "details": [...]}"""
    return {"message": message, "details": details or []}


def to_http_exception(operation_name: str, error: Exception) -> HTTPException:
    """
    Map an exception raised by an endpoint to an HTTPException.

    Args:
        operation_name: Human-readable name of the operation
        error: The exception that escaped the endpoint

    Returns:
        HTTPException with a status code matching the error type
    """
    if isinstance(error, NotFoundError):
        logger.info(f"{operation_name} - Not found: {error.message}")
        return HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=error_detail("Resource not found", [error.message])
        )
    if isinstance(error, ValidationError):
        logger.warning(f"{operation_name} - Validation error: {error.message}")
        return HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail=error_detail("Validation failed", error.full_messages())
        )
    if isinstance(error, ConfigurationError):
        logger.warning(f"{operation_name} - Configuration error: {error.message}")
        return HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=error_detail(error.message)
        )
    if isinstance(error, ApplicationError):
        logger.error(f"{operation_name} - Application error: {error.message}", exc_info=error)
        return HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=error_detail(f"{operation_name} failed", [error.message])
        )

    logger.error(f"{operation_name} - Unexpected error: {error}", exc_info=error)
    return HTTPException(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        detail=error_detail(f"{operation_name} failed. Please check server logs or contact support.")
    )


def handle_api_errors(operation_name: str):
    """
    Decorator to handle application errors consistently across endpoints.

    Args:
        operation_name: Human-readable name of the operation (e.g., "Get document")

    Example:
        @router.get("/documents/{document_id}")
        @handle_api_errors("Get document")
        def get_document(document_id: int, ...):
            ...
    """
    def decorator(func: Callable):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                # Re-raise HTTPException as-is to preserve status code and detail
                raise
            except Exception as e:
                raise to_http_exception(operation_name, e) from e

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                raise to_http_exception(operation_name, e) from e

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
