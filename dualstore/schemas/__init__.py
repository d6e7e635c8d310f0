# ==============================================================================
# SCHEMAS PACKAGE INITIALIZATION
# ==============================================================================

"""
Pydantic Schemas
================

- Base: Shared configuration, response envelopes, health payload
- User: Entity contract (create/update validation, stored record)
"""

from dualstore.schemas.base import (
    BaseSchema,
    ErrorEnvelope,
    HealthResponse,
    SuccessEnvelope,
)
from dualstore.schemas.user import (
    UserCreate,
    UserRecord,
    UserUpdate,
    validate_for_create,
    validate_for_update,
)

__all__ = [
    "BaseSchema",
    "ErrorEnvelope",
    "HealthResponse",
    "SuccessEnvelope",
    "UserCreate",
    "UserRecord",
    "UserUpdate",
    "validate_for_create",
    "validate_for_update",
]
