# ==============================================================================
# USER MODEL - Relational Table
# ==============================================================================
# `users` table backing the relational store adapter
# ==============================================================================

from __future__ import annotations

from typing import Optional

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from dualstore.core.constants import DatabaseConstants, Role, UserConstants
from dualstore.domain_models.base import SQLBase, TimestampMixin


class User(SQLBase, TimestampMixin):
    """
    User row.

    Attributes:
        id: Auto-increment integer primary key
        name: Display name
        email: Unique, lowercased email address
        age: Optional age in years
        role: USER, ADMIN or MODERATOR
    """

    __tablename__ = DatabaseConstants.USERS_COLLECTION

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(UserConstants.NAME_MAX_LENGTH),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(UserConstants.EMAIL_MAX_LENGTH),
        unique=True,
        index=True,
        nullable=False,
    )
    age: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role"),
        default=Role.USER,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
