# ==============================================================================
# RESPONSE NORMALIZER - Uniform JSON Envelopes
# ==============================================================================
# The only place that decides HTTP status codes. Endpoints hand it records,
# exception handlers hand it errors; both come out as the same envelope.
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import status
from fastapi.responses import JSONResponse

from dualstore.core.constants import ErrorMessages, SuccessMessages
from dualstore.core.exceptions import AppException, ErrorCode
from dualstore.schemas.base import ErrorEnvelope, SuccessEnvelope
from dualstore.schemas.user import UserRecord

logger = logging.getLogger(__name__)

_STATUS_BY_CODE: Dict[str, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_KEY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ROUTE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.STORE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: AppException) -> int:
    """HTTP status for an application error; unknown kinds map to 500."""
    return _STATUS_BY_CODE.get(
        exc.error_code,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# Top-level envelope keys omitted when unset
_OPTIONAL_KEYS = ("message", "results", "error")


def _respond(status_code: int, envelope: Any) -> JSONResponse:
    content = envelope.model_dump(mode="json")
    for key in _OPTIONAL_KEYS:
        if content.get(key) is None:
            content.pop(key, None)
    return JSONResponse(status_code=status_code, content=content)


# ==============================================================================
# SUCCESS OUTCOMES
# ==============================================================================

def read_many(users: List[UserRecord]) -> JSONResponse:
    """200 with record count and data.users."""
    return _respond(
        status.HTTP_200_OK,
        SuccessEnvelope(
            results=len(users),
            data={"users": [user.to_public() for user in users]},
        ),
    )


def read_one(user: UserRecord) -> JSONResponse:
    return _respond(
        status.HTTP_200_OK,
        SuccessEnvelope(data={"user": user.to_public()}),
    )


def created(user: UserRecord) -> JSONResponse:
    return _respond(
        status.HTTP_201_CREATED,
        SuccessEnvelope(
            message=SuccessMessages.USER_CREATED,
            data={"user": user.to_public()},
        ),
    )


def updated(user: UserRecord) -> JSONResponse:
    return _respond(
        status.HTTP_200_OK,
        SuccessEnvelope(
            message=SuccessMessages.USER_UPDATED,
            data={"user": user.to_public()},
        ),
    )


def deleted(user: UserRecord) -> JSONResponse:
    return _respond(
        status.HTTP_200_OK,
        SuccessEnvelope(
            message=SuccessMessages.USER_DELETED,
            data={"user": user.to_public()},
        ),
    )


# ==============================================================================
# ERROR OUTCOMES
# ==============================================================================

def error_response(exc: AppException) -> JSONResponse:
    """
    Envelope for any taxonomy error.

    Only an `error` entry in the exception details reaches the client;
    StoreError is the one kind that sets it. Other details (field, id)
    stay server-side.
    """
    return _respond(
        status_for(exc),
        ErrorEnvelope(message=exc.message, error=exc.details.get("error")),
    )


def route_not_found(method: str, path: str) -> JSONResponse:
    return _respond(
        status.HTTP_404_NOT_FOUND,
        ErrorEnvelope(message=f"Cannot {method} {path} - Route not found"),
    )


def invalid_body() -> JSONResponse:
    return _respond(
        status.HTTP_400_BAD_REQUEST,
        ErrorEnvelope(message=ErrorMessages.INVALID_BODY),
    )


def http_error(status_code: int, message: str) -> JSONResponse:
    """Envelope for framework-level HTTP errors (405 and friends)."""
    return _respond(status_code, ErrorEnvelope(message=message))


def internal_error(exc: Exception, debug: bool = False) -> JSONResponse:
    """500 for exceptions outside the taxonomy; detail only in debug."""
    return _respond(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorEnvelope(
            message=ErrorMessages.INTERNAL_ERROR,
            error=str(exc) if debug else None,
        ),
    )
