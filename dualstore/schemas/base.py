# ==============================================================================
# BASE SCHEMAS - Common Schema Patterns
# ==============================================================================
# Shared model configuration and the JSON envelopes every response uses
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    All entity schemas inherit from this class
    to ensure consistent serialization behavior.
    """

    model_config = ConfigDict(
        from_attributes=True,  # Enable ORM mode
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )


class SuccessEnvelope(BaseModel):
    """
    Envelope for successful operations.

    Attributes:
        status: Always "success"
        message: Present on mutations
        results: Record count, present on list reads
        data: {"user": {...}} or {"users": [...]}
    """

    status: Literal["success"] = "success"
    message: Optional[str] = Field(
        None,
        description="Status message for mutations"
    )
    results: Optional[int] = Field(
        None,
        ge=0,
        description="Number of records in a list response"
    )
    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Response payload"
    )


class ErrorEnvelope(BaseModel):
    """
    Envelope for failed operations.

    `error` carries raw store detail for StoreError only; clients must
    be able to act on `message` alone.
    """

    status: Literal["error"] = "error"
    message: str = Field(
        ...,
        description="Stable, human-readable failure description"
    )
    error: Optional[Any] = Field(
        None,
        description="Supplementary failure detail"
    )


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: Literal["success"] = "success"
    message: str = Field(
        ...,
        description="Health status message"
    )
    version: str = Field(
        ...,
        description="Application version"
    )
    timestamp: datetime = Field(
        ...,
        description="Server time (UTC)"
    )
    uptime: float = Field(
        ...,
        ge=0,
        description="Seconds since the process started"
    )
    stores: Dict[str, str] = Field(
        default_factory=dict,
        description="Connection status per store backend"
    )
