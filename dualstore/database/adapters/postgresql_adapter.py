# ==============================================================================
# POSTGRESQL ADAPTER - SQLAlchemy Async Implementation
# ==============================================================================
# Relational-store adapter for the User entity
# asyncpg in production, aiosqlite for development and tests
# ==============================================================================

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Dict, Iterator, List, Mapping, Optional

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from dualstore.core.constants import Backend, DatabaseConstants, ErrorMessages
from dualstore.core.exceptions import (
    DuplicateKeyError,
    InvalidIdError,
    NotFoundError,
    StoreConnectionError,
    StoreError,
)
from dualstore.database.adapters.base_adapter import BaseUserAdapter
from dualstore.domain_models.base import SQLBase
from dualstore.domain_models.user import User
from dualstore.schemas.user import (
    UserRecord,
    validate_for_create,
    validate_for_update,
)
from dualstore.utils.helpers import utc_now

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


class PostgreSQLAdapter(BaseUserAdapter[int]):
    """
    Relational user adapter using SQLAlchemy async.

    Features:
        - Strict integer identifiers (InvalidIdError before any query)
        - Sparse UPDATE ... RETURNING: only supplied columns are written
        - DELETE ... RETURNING for the deleted snapshot
        - Unique-violation detection for PostgreSQL and SQLite drivers
        - Automatic table creation on connect

    Attributes:
        _database_url: Async SQLAlchemy connection URL
        _engine: SQLAlchemy async engine
        _session_factory: Session factory for creating sessions

    Example:
        >>> adapter = PostgreSQLAdapter("postgresql+asyncpg://u:p@db/app")
        >>> await adapter.connect()
        >>> user = await adapter.create({"name": "Bo", "email": "bo@ex.com"})
        >>> print(user.id)  # 1
    """

    backend = Backend.POSTGRES
    store_label = "PostgreSQL"

    def __init__(
        self,
        database_url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        echo: bool = False,
    ) -> None:
        """
        Initialize relational adapter.

        Args:
            database_url: Connection URL; sqlite:// is upgraded to aiosqlite
            pool_size: Connections kept in the pool (server databases only)
            max_overflow: Extra connections allowed beyond pool_size
            pool_timeout: Seconds to wait for a pooled connection
            pool_recycle: Seconds before a connection is recycled
            echo: Log every SQL statement
        """
        # Ensure async driver is used
        if database_url.startswith("sqlite://"):
            database_url = database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)

        self._database_url = database_url
        self._pool_options = {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_recycle": pool_recycle,
        }
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        """
        Initialize database engine and create tables.
        """
        if self._engine is not None:
            return

        engine_options: Dict[str, Any] = {
            "echo": self._echo,
            "pool_pre_ping": True,
        }
        # SQLite uses single-connection pools that reject sizing options
        if not self._database_url.startswith("sqlite"):
            engine_options.update(self._pool_options)

        try:
            self._engine = create_async_engine(self._database_url, **engine_options)
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            async with self._engine.begin() as conn:
                await conn.run_sync(SQLBase.metadata.create_all)

            logger.info("PostgreSQL adapter connected successfully")

        except Exception as e:
            logger.error(f"Failed to connect to PostgreSQL: {e}")
            if self._engine is not None:
                await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            raise StoreConnectionError(
                message="PostgreSQL connection failed",
                detail=str(e),
            ) from e

    async def disconnect(self) -> None:
        """Close database connections and dispose engine."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("PostgreSQL adapter disconnected")
        self._engine = None
        self._session_factory = None

    async def health_check(self) -> bool:
        """
        Verify database connectivity.

        Returns:
            True if connection is healthy
        """
        if self._session_factory is None:
            return False
        try:
            async with self._session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"PostgreSQL health check failed: {e}")
            return False

    # ==========================================================================
    # SESSION MANAGEMENT
    # ==========================================================================

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide transactional session scope.

        Commits on successful exit, rolls back on exception.
        """
        if self._session_factory is None:
            raise StoreError(ErrorMessages.STORE_NOT_CONNECTED)

        session: AsyncSession = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    # ==========================================================================
    # ERROR TRANSLATION
    # ==========================================================================

    @staticmethod
    def _is_unique_violation(exc: IntegrityError) -> bool:
        """Recognize unique violations from asyncpg and sqlite drivers."""
        orig = exc.orig
        sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        if sqlstate:
            return sqlstate == DatabaseConstants.PG_UNIQUE_VIOLATION
        return "UNIQUE constraint failed" in str(orig)

    def _store_error(self, action: str, exc: Exception) -> StoreError:
        logger.error(f"PostgreSQL operation '{action}' failed: {exc}")
        orig = getattr(exc, "orig", None)
        return StoreError(
            message=f"Failed to {action} PostgreSQL",
            detail=str(orig or exc),
        )

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        """Map SQLAlchemy and driver exceptions onto the error taxonomy."""
        try:
            yield
        except IntegrityError as exc:
            if self._is_unique_violation(exc):
                raise DuplicateKeyError() from None
            raise self._store_error(action, exc) from exc
        except (SQLAlchemyError, OSError) as exc:
            raise self._store_error(action, exc) from exc

    # ==========================================================================
    # IDENTIFIERS
    # ==========================================================================

    def parse_id(self, raw_id: Any) -> int:
        """Accept a positive int or a string of ASCII digits."""
        if isinstance(raw_id, bool):
            raise InvalidIdError(raw_id)
        if isinstance(raw_id, int):
            value = raw_id
        elif isinstance(raw_id, str) and _DIGITS.fullmatch(raw_id):
            value = int(raw_id)
        else:
            raise InvalidIdError(raw_id)

        if not 1 <= value <= DatabaseConstants.MAX_INTEGER_ID:
            raise InvalidIdError(raw_id)
        return value

    @staticmethod
    def _to_record(user: User) -> UserRecord:
        return UserRecord.model_validate(user.to_dict())

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    async def list_all(self) -> List[UserRecord]:
        """Retrieve all rows ordered by id."""
        with self._translate_errors("fetch users from"):
            async with self._session() as session:
                result = await session.scalars(select(User).order_by(User.id))
                return [self._to_record(user) for user in result.all()]

    async def get_by_id(self, id: Any) -> UserRecord:
        """Retrieve row by primary key."""
        user_id = self.parse_id(id)

        with self._translate_errors("fetch user from"):
            async with self._session() as session:
                user = await session.get(User, user_id)
                if user is None:
                    raise NotFoundError(user_id)
                return self._to_record(user)

    async def create(self, payload: Mapping[str, Any]) -> UserRecord:
        """Validate and insert a new row."""
        data = validate_for_create(payload)
        now = utc_now()

        with self._translate_errors("create user in"):
            async with self._session() as session:
                user = User(**data, created_at=now, updated_at=now)
                session.add(user)
                await session.flush()
                record = self._to_record(user)

        logger.info(f"User saved to PostgreSQL: {record.email}")
        return record

    async def update(self, id: Any, payload: Mapping[str, Any]) -> UserRecord:
        """
        Write only the supplied columns and return the updated row.

        An empty payload skips the write and returns the current row.
        """
        user_id = self.parse_id(id)
        changes = validate_for_update(payload)

        if not changes:
            return await self.get_by_id(user_id)

        changes["updated_at"] = utc_now()
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(**changes)
            .returning(User)
            .execution_options(synchronize_session=False)
        )

        with self._translate_errors("update user in"):
            async with self._session() as session:
                user = (await session.scalars(stmt)).one_or_none()
                if user is None:
                    raise NotFoundError(user_id)
                return self._to_record(user)

    async def delete(self, id: Any) -> UserRecord:
        """Delete a row and return its last state."""
        user_id = self.parse_id(id)
        stmt = (
            delete(User)
            .where(User.id == user_id)
            .returning(User)
            .execution_options(synchronize_session=False)
        )

        with self._translate_errors("delete user from"):
            async with self._session() as session:
                user = (await session.scalars(stmt)).one_or_none()
                if user is None:
                    raise NotFoundError(user_id)
                record = self._to_record(user)

        logger.info(f"User deleted from PostgreSQL: {record.email}")
        return record
