"""
Custom exception classes for the application.

This module defines domain-specific exceptions raised by the DTO layer and the
PublicApi gateways. Non-raising gateway methods signal the same conditions
with None/False/0 instead.
"""


class ApplicationError(Exception):
    """Base exception for all application errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when a DTO or gateway class is misconfigured"""

    def __init__(self, message: str, missing_keys: list[str] | None = None):
        details = {"missing_keys": missing_keys} if missing_keys else {}
        super().__init__(message, details)


class ValidationError(ApplicationError):
    """Raised when a record fails validation on create/update"""

    def __init__(self, message: str, invalid_fields: dict | None = None):
        details = {"invalid_fields": invalid_fields} if invalid_fields else {}
        super().__init__(message, details)
        self.invalid_fields = invalid_fields or {}

    def full_messages(self) -> list[str]:
        """Flatten field errors into "field message" strings."""
        return [
            f"{field} {message}"
            for field, messages in self.invalid_fields.items()
            for message in messages
        ]


class NotFoundError(ApplicationError):
    """Raised when a record is looked up by id and does not exist"""

    def __init__(self, entity: str, record_id):
        details = {"entity": entity, "id": record_id}
        super().__init__(f"{entity} with id={record_id!r} not found", details)
        self.entity = entity
        self.record_id = record_id


class TransformError(ApplicationError):
    """Raised when a DTO attribute transform fails during construction"""

    def __init__(self, attribute: str, dto_name: str, cause: Exception):
        details = {"attribute": attribute, "dto": dto_name, "error": str(cause)}
        msg = f"Transform for {dto_name}.{attribute} failed: {type(cause).__name__}: {cause}"
        super().__init__(msg, details)
        self.attribute = attribute


class UnknownAttributeError(ApplicationError):
    """Raised by strict DTOs when the source does not provide an attribute"""

    def __init__(self, attribute: str, dto_name: str, source_type: str):
        details = {"attribute": attribute, "dto": dto_name, "source_type": source_type}
        msg = f"{source_type} does not provide attribute '{attribute}' required by {dto_name}"
        super().__init__(msg, details)
        self.attribute = attribute


class DatabaseError(ApplicationError):
    """Raised when database operations fail"""

    def __init__(self, operation: str, message: str):
        details = {"operation": operation}
        super().__init__(message, details)
