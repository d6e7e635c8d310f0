# ==============================================================================
# APPLICATION CONSTANTS - Centralized Configuration Values
# ==============================================================================
# Enumerations, field limits and user-facing messages
# ==============================================================================

from __future__ import annotations

import enum
from typing import Final


# ==============================================================================
# ENUMERATIONS
# ==============================================================================

class Backend(str, enum.Enum):
    """Store backend tag taken from the request path."""

    MONGO = "mongo"
    POSTGRES = "postgres"


class Role(str, enum.Enum):
    """User roles. Names and values are identical."""

    USER = "USER"
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"


class AgeGroup(str, enum.Enum):
    """Age bracket derived from a user's age."""

    UNKNOWN = "Unknown"
    MINOR = "Minor"
    ADULT = "Adult"
    SENIOR = "Senior"


# ==============================================================================
# DATABASE CONSTANTS
# ==============================================================================

class DatabaseConstants:
    """Database-related constants."""

    # Collection/Table names
    USERS_COLLECTION: Final[str] = "users"

    # MongoDB duplicate key server error
    MONGO_DUPLICATE_KEY_CODE: Final[int] = 11000

    # PostgreSQL unique_violation SQLSTATE
    PG_UNIQUE_VIOLATION: Final[str] = "23505"

    # Largest value of a 32-bit INTEGER primary key
    MAX_INTEGER_ID: Final[int] = 2_147_483_647


# ==============================================================================
# USER FIELD LIMITS
# ==============================================================================

class UserConstants:
    """Validation limits for the User entity."""

    NAME_MIN_LENGTH: Final[int] = 2
    NAME_MAX_LENGTH: Final[int] = 50
    EMAIL_MAX_LENGTH: Final[int] = 255
    AGE_MIN: Final[int] = 0
    AGE_MAX: Final[int] = 150
    ADULT_AGE: Final[int] = 18
    SENIOR_AGE: Final[int] = 65
    EMAIL_PATTERN: Final[str] = r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$"


# ==============================================================================
# ERROR MESSAGES
# ==============================================================================

class ErrorMessages:
    """Standardized error messages."""

    # Resources
    USER_NOT_FOUND: Final[str] = "User not found"
    INVALID_USER_ID: Final[str] = "Invalid user ID"
    EMAIL_EXISTS: Final[str] = "Email already exists"

    # Requests
    INVALID_BODY: Final[str] = "Invalid request body"
    BODY_NOT_OBJECT: Final[str] = "Request body must be a JSON object"
    INTERNAL_ERROR: Final[str] = "Internal Server Error"
    STORE_NOT_CONNECTED: Final[str] = "Store is not connected"

    # Field validation
    NAME_TOO_SHORT: Final[str] = "Name must be at least 2 characters"
    NAME_TOO_LONG: Final[str] = "Name cannot exceed 50 characters"
    INVALID_EMAIL: Final[str] = "Please provide a valid email"
    AGE_NEGATIVE: Final[str] = "Age cannot be negative"
    AGE_TOO_HIGH: Final[str] = "Age seems invalid"
    AGE_NOT_INTEGER: Final[str] = "Age must be an integer"


# ==============================================================================
# SUCCESS MESSAGES
# ==============================================================================

class SuccessMessages:
    """Standardized success messages."""

    USER_CREATED: Final[str] = "User created successfully"
    USER_UPDATED: Final[str] = "User updated successfully"
    USER_DELETED: Final[str] = "User deleted successfully"
    SERVER_RUNNING: Final[str] = "Server is running"
