# ==============================================================================
# USER SCHEMAS - Entity Contract
# ==============================================================================
# Shape and validation rules of a User, independent of storage backend.
# Both adapters validate every payload through validate_for_create /
# validate_for_update before touching their store.
# ==============================================================================

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, NoReturn, Optional, Union

from pydantic import Field, computed_field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from dualstore.core.constants import AgeGroup, ErrorMessages, Role, UserConstants
from dualstore.core.exceptions import ValidationError
from dualstore.schemas.base import BaseSchema
from dualstore.utils.helpers import as_utc

_EMAIL_RE = re.compile(UserConstants.EMAIL_PATTERN)

_FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "age": "Age",
    "role": "Role",
}

# pydantic error types raised when age is not a whole number
_INTEGER_ERRORS = frozenset({"int_parsing", "int_type", "int_from_float"})


def _label(field: str) -> str:
    return _FIELD_LABELS.get(field, field.capitalize())


def _reject(field: str, message: str) -> NoReturn:
    raise PydanticCustomError(f"{field}_invalid", message)


# ==============================================================================
# FIELD RULES
# ==============================================================================

class _UserFields(BaseSchema):
    """Field rules shared by the create and update schemas."""

    @field_validator("name", mode="before", check_fields=False)
    @classmethod
    def validate_name(cls, v: Any) -> str:
        if v is None:
            _reject("name", "Name cannot be null")
        if not isinstance(v, str):
            _reject("name", "Name must be a string")
        v = v.strip()
        if not v:
            _reject("name", "Name is required")
        if len(v) < UserConstants.NAME_MIN_LENGTH:
            _reject("name", ErrorMessages.NAME_TOO_SHORT)
        if len(v) > UserConstants.NAME_MAX_LENGTH:
            _reject("name", ErrorMessages.NAME_TOO_LONG)
        return v

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def validate_email(cls, v: Any) -> str:
        if v is None:
            _reject("email", "Email cannot be null")
        if not isinstance(v, str):
            _reject("email", "Email must be a string")
        v = v.strip().lower()
        if not v:
            _reject("email", "Email is required")
        if len(v) > UserConstants.EMAIL_MAX_LENGTH or not _EMAIL_RE.match(v):
            _reject("email", ErrorMessages.INVALID_EMAIL)
        return v

    @field_validator("age", mode="before", check_fields=False)
    @classmethod
    def reject_boolean_age(cls, v: Any) -> Any:
        # bool is an int subclass; pydantic would accept True as 1
        if isinstance(v, bool):
            _reject("age", ErrorMessages.AGE_NOT_INTEGER)
        return v

    @field_validator("age", check_fields=False)
    @classmethod
    def validate_age_range(cls, v: Optional[int]) -> Optional[int]:
        if v is None:
            return v
        if v < UserConstants.AGE_MIN:
            _reject("age", ErrorMessages.AGE_NEGATIVE)
        if v > UserConstants.AGE_MAX:
            _reject("age", ErrorMessages.AGE_TOO_HIGH)
        return v

    @field_validator("role", mode="before", check_fields=False)
    @classmethod
    def validate_role(cls, v: Any) -> Any:
        if v is None:
            _reject("role", "Role cannot be null")
        if isinstance(v, Role):
            return v
        if isinstance(v, str) and v in Role._value2member_map_:
            return v
        _reject("role", f"{v} is not a valid role")


class UserCreate(_UserFields):
    """Payload accepted by the create operation."""

    name: str = Field(
        ...,
        description="Display name (trimmed, 2-50 chars)",
        examples=["Ann"],
    )
    email: str = Field(
        ...,
        description="Unique email address (lowercased)",
        examples=["ann@example.com"],
    )
    age: Optional[int] = Field(
        None,
        description="Age in years (0-150)",
    )
    role: Role = Field(
        Role.USER,
        description="USER, ADMIN or MODERATOR",
    )


class UserUpdate(_UserFields):
    """Payload accepted by the update operation; every field optional."""

    name: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None
    role: Optional[Role] = None


class UserRecord(BaseSchema):
    """
    Stored representation of a User as returned by either adapter.

    `id` is a string on the document store and an integer on the
    relational store. Timestamps serialize as createdAt / updatedAt, and
    the derived age bracket as ageGroup.
    """

    id: Union[int, str]
    name: str
    email: str
    age: Optional[int] = None
    role: Role = Role.USER
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return as_utc(v)

    @computed_field(alias="ageGroup")
    @property
    def age_group(self) -> str:
        """Unknown for a missing or zero age, then Minor, Adult, Senior."""
        if not self.age:
            return AgeGroup.UNKNOWN.value
        if self.age < UserConstants.ADULT_AGE:
            return AgeGroup.MINOR.value
        if self.age < UserConstants.SENIOR_AGE:
            return AgeGroup.ADULT.value
        return AgeGroup.SENIOR.value

    def to_public(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


# ==============================================================================
# CONTRACT OPERATIONS
# ==============================================================================

def _raise_contract_error(exc: PydanticValidationError) -> NoReturn:
    """Reduce the first pydantic error to ValidationError(field, reason)."""
    error = exc.errors()[0]
    field = str(error["loc"][0]) if error["loc"] else "body"

    if error["type"] == "missing":
        reason = f"{_label(field)} is required"
    elif error["type"] in _INTEGER_ERRORS:
        reason = f"{_label(field)} must be an integer"
    elif error["type"] == "string_type":
        reason = f"{_label(field)} must be a string"
    else:
        reason = error["msg"]

    raise ValidationError(field, reason) from None


def _ensure_mapping(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValidationError("body", ErrorMessages.BODY_NOT_OBJECT)
    return data


def validate_for_create(data: Any) -> Dict[str, Any]:
    """
    Validate and normalize a create payload.

    Args:
        data: Raw request body

    Returns:
        Dict with name, email, age and role; name trimmed, email
        lowercased, age coerced to int (or None), role defaulted

    Raises:
        ValidationError: On the first invalid or missing field
    """
    payload = _ensure_mapping(data)
    try:
        schema = UserCreate.model_validate(dict(payload))
    except PydanticValidationError as exc:
        _raise_contract_error(exc)
    return schema.model_dump()


def validate_for_update(data: Any) -> Dict[str, Any]:
    """
    Validate a partial update payload.

    Only supplied fields are checked and returned; an empty payload
    yields an empty dict.

    Raises:
        ValidationError: If a supplied field is invalid
    """
    payload = _ensure_mapping(data)
    try:
        schema = UserUpdate.model_validate(dict(payload))
    except PydanticValidationError as exc:
        _raise_contract_error(exc)
    return schema.model_dump(exclude_unset=True)
