# ==============================================================================
# USER CONTRACT TESTS
# ==============================================================================
# Validation and normalization rules shared by both stores
# ==============================================================================

from datetime import datetime, timezone

import pytest

from dualstore.core.exceptions import ValidationError
from dualstore.schemas.user import (
    UserRecord,
    validate_for_create,
    validate_for_update,
)


class TestValidateForCreate:
    """Tests for create payload validation."""

    def test_defaults_applied(self):
        data = validate_for_create({"name": "Ann", "email": "ann@ex.com"})

        assert data == {
            "name": "Ann",
            "email": "ann@ex.com",
            "age": None,
            "role": "USER",
        }

    def test_name_trimmed_and_email_lowercased(self):
        data = validate_for_create({"name": "  Ann  ", "email": " Ann@EX.com "})

        assert data["name"] == "Ann"
        assert data["email"] == "ann@ex.com"

    def test_numeric_string_age_coerced(self):
        data = validate_for_create({"name": "Bo", "email": "bo@ex.com", "age": "30"})
        assert data["age"] == 30

    def test_unknown_fields_ignored(self):
        data = validate_for_create(
            {"name": "Bo", "email": "bo@ex.com", "isAdmin": True}
        )
        assert "isAdmin" not in data

    @pytest.mark.parametrize(
        "payload, field, reason",
        [
            ({"email": "a@ex.com"}, "name", "Name is required"),
            ({"name": "   ", "email": "a@ex.com"}, "name", "Name is required"),
            ({"name": "A", "email": "a@ex.com"}, "name", "Name must be at least 2 characters"),
            ({"name": "A" * 51, "email": "a@ex.com"}, "name", "Name cannot exceed 50 characters"),
            ({"name": "Ann"}, "email", "Email is required"),
            ({"name": "Ann", "email": "not-an-email"}, "email", "Please provide a valid email"),
            ({"name": "Ann", "email": "a@ex.com", "age": -1}, "age", "Age cannot be negative"),
            ({"name": "Ann", "email": "a@ex.com", "age": 151}, "age", "Age seems invalid"),
            ({"name": "Ann", "email": "a@ex.com", "age": "abc"}, "age", "Age must be an integer"),
            ({"name": "Ann", "email": "a@ex.com", "age": True}, "age", "Age must be an integer"),
            ({"name": "Ann", "email": "a@ex.com", "role": "SUPERUSER"}, "role", "SUPERUSER is not a valid role"),
        ],
    )
    def test_rejections(self, payload, field, reason):
        with pytest.raises(ValidationError) as info:
            validate_for_create(payload)

        assert info.value.field == field
        assert info.value.reason == reason
        assert info.value.message == reason

    def test_age_bounds_inclusive(self):
        assert validate_for_create({"name": "Ann", "email": "a@ex.com", "age": 0})["age"] == 0
        assert validate_for_create({"name": "Ann", "email": "a@ex.com", "age": 150})["age"] == 150

    def test_non_object_body_rejected(self):
        with pytest.raises(ValidationError) as info:
            validate_for_create(["Ann", "ann@ex.com"])
        assert info.value.field == "body"


class TestValidateForUpdate:
    """Tests for partial update validation."""

    def test_empty_payload(self):
        assert validate_for_update({}) == {}

    def test_only_supplied_fields_returned(self):
        assert validate_for_update({"age": 26}) == {"age": 26}

    def test_null_age_clears(self):
        assert validate_for_update({"age": None}) == {"age": None}

    def test_supplied_fields_normalized(self):
        data = validate_for_update({"email": "NEW@Ex.com", "role": "ADMIN"})
        assert data == {"email": "new@ex.com", "role": "ADMIN"}

    def test_invalid_supplied_field_rejected(self):
        with pytest.raises(ValidationError) as info:
            validate_for_update({"name": "X"})
        assert info.value.reason == "Name must be at least 2 characters"

    def test_null_name_rejected(self):
        with pytest.raises(ValidationError) as info:
            validate_for_update({"name": None})
        assert info.value.field == "name"


class TestUserRecord:
    """Tests for the stored representation."""

    def test_public_shape_uses_camel_case_timestamps(self):
        now = datetime(2024, 5, 1, 12, 0, 0, 123000, tzinfo=timezone.utc)
        record = UserRecord(
            id=1,
            name="Ann",
            email="ann@ex.com",
            created_at=now,
            updated_at=now,
        )

        public = record.to_public()

        assert set(public) == {
            "id", "name", "email", "age", "role", "createdAt", "updatedAt", "ageGroup",
        }
        assert public["role"] == "USER"
        assert public["ageGroup"] == "Unknown"
        assert public["age"] is None

    def test_naive_timestamps_read_as_utc(self):
        naive = datetime(2024, 5, 1, 12, 0, 0)
        record = UserRecord.model_validate(
            {
                "id": "abc",
                "name": "Ann",
                "email": "ann@ex.com",
                "createdAt": naive,
                "updatedAt": naive,
            }
        )

        assert record.created_at.tzinfo is not None
        assert record.created_at == naive.replace(tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "age, group",
        [
            (None, "Unknown"),
            (0, "Unknown"),
            (1, "Minor"),
            (17, "Minor"),
            (18, "Adult"),
            (64, "Adult"),
            (65, "Senior"),
            (150, "Senior"),
        ],
    )
    def test_age_group(self, age, group):
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        record = UserRecord(
            id=1,
            name="Ann",
            email="ann@ex.com",
            age=age,
            created_at=now,
            updated_at=now,
        )

        assert record.age_group == group
        assert record.to_public()["ageGroup"] == group
