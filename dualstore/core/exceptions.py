# ==============================================================================
# CUSTOM EXCEPTIONS - Application Error Hierarchy
# ==============================================================================
# Five-kind taxonomy every adapter reduces store-native errors to,
# plus routing errors raised at the HTTP boundary.
# HTTP status codes live in dualstore.api.normalizer, not here.
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional

from dualstore.core.constants import ErrorMessages


class ErrorCode:
    """Machine-readable error kinds."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    STORE_ERROR = "STORE_ERROR"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"


class AppException(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable, stable error description
        error_code: Machine-readable error kind (see ErrorCode)
        details: Additional context, never required by clients

    Example:
        >>> raise NotFoundError(resource_id=42)
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}')"
        )


# ==============================================================================
# ENTITY EXCEPTIONS
# ==============================================================================

class ValidationError(AppException):
    """
    Raised when a payload breaks the User contract.

    Attributes:
        field: Offending field name
        reason: Why the value was rejected (also the message)
    """

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(
            message=reason,
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"field": field},
        )
        self.field = field
        self.reason = reason


class InvalidIdError(AppException):
    """Raised when an identifier is not well-formed for the target store."""

    def __init__(self, raw_id: Any = None) -> None:
        super().__init__(
            message=ErrorMessages.INVALID_USER_ID,
            error_code=ErrorCode.INVALID_ID,
            details={"id": str(raw_id)} if raw_id is not None else None,
        )
        self.raw_id = raw_id


class NotFoundError(AppException):
    """Raised when no record matches a well-formed identifier."""

    def __init__(self, resource_id: Any = None) -> None:
        super().__init__(
            message=ErrorMessages.USER_NOT_FOUND,
            error_code=ErrorCode.NOT_FOUND,
            details={"id": str(resource_id)} if resource_id is not None else None,
        )
        self.resource_id = resource_id


class DuplicateKeyError(AppException):
    """Raised when a write collides with the unique email constraint."""

    def __init__(self, field: str = "email") -> None:
        super().__init__(
            message=ErrorMessages.EMAIL_EXISTS,
            error_code=ErrorCode.DUPLICATE_KEY,
            details={"field": field},
        )
        self.field = field


# ==============================================================================
# STORE EXCEPTIONS
# ==============================================================================

class StoreError(AppException):
    """
    Catch-all for connectivity and unexpected backend failures.

    Attributes:
        detail: Raw driver message, supplementary only
    """

    def __init__(
        self,
        message: str = "Store operation failed",
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.STORE_ERROR,
            details={"error": detail} if detail else None,
        )
        self.detail = detail


class StoreConnectionError(StoreError):
    """Raised when a store cannot be reached at startup."""


# ==============================================================================
# ROUTING EXCEPTIONS
# ==============================================================================

class RouteNotFoundError(AppException):
    """Raised for paths (or backend segments) nothing is mounted on."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(
            message=f"Cannot {method} {path} - Route not found",
            error_code=ErrorCode.ROUTE_NOT_FOUND,
        )
