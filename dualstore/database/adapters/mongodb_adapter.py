# ==============================================================================
# MONGODB ADAPTER - Motor Async Driver Implementation
# ==============================================================================
# Document-store adapter for the User entity
# Opaque ObjectId identifiers, unique email index, non-blocking I/O via Motor
# ==============================================================================

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

from bson import ObjectId
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo import errors as mongo_errors

from dualstore.core.constants import Backend, DatabaseConstants, ErrorMessages
from dualstore.core.exceptions import (
    DuplicateKeyError,
    InvalidIdError,
    NotFoundError,
    StoreConnectionError,
    StoreError,
)
from dualstore.database.adapters.base_adapter import BaseUserAdapter
from dualstore.schemas.user import (
    UserRecord,
    validate_for_create,
    validate_for_update,
)
from dualstore.utils.helpers import utc_now

logger = logging.getLogger(__name__)


class MongoDBAdapter(BaseUserAdapter[ObjectId]):
    """
    MongoDB user adapter using the Motor async driver.

    Features:
        - ObjectId <-> string conversion at the adapter boundary
        - Unique email index created on connect
        - One store call per operation (find_one_and_update /
          find_one_and_delete return the affected document)
        - Driver errors translated to the shared error taxonomy

    Attributes:
        _connection_url: MongoDB connection string
        _database_name: Target database name
        _client: Motor async client (created on connect or injected)
        _database: Target database instance

    Example:
        >>> adapter = MongoDBAdapter("mongodb://localhost:27017", "app_db")
        >>> await adapter.connect()
        >>> user = await adapter.create({"name": "Ann", "email": "ann@ex.com"})
        >>> print(user.id)  # 24-hex string
    """

    backend = Backend.MONGO
    store_label = "MongoDB"

    def __init__(
        self,
        connection_url: str,
        database_name: str,
        *,
        pool_size: int = 10,
        pool_timeout: int = 30,
        server_selection_timeout_ms: int = 5000,
        client: Optional[AsyncIOMotorClient] = None,
    ) -> None:
        """
        Initialize MongoDB adapter.

        Args:
            connection_url: MongoDB connection URI
            database_name: Database holding the users collection
            pool_size: Maximum connections in the driver pool
            pool_timeout: Idle seconds before a pooled connection closes
            server_selection_timeout_ms: Driver server selection timeout
            client: Pre-built client; used as is and left open on disconnect
        """
        self._connection_url = connection_url
        self._database_name = database_name
        self._pool_size = pool_size
        self._pool_timeout = pool_timeout
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client = client
        self._owns_client = client is None
        self._database: Optional[AsyncIOMotorDatabase] = None

    # ==========================================================================
    # INTERNAL HELPERS
    # ==========================================================================

    @property
    def _users(self) -> AsyncIOMotorCollection:
        if self._database is None:
            raise StoreError(ErrorMessages.STORE_NOT_CONNECTED)
        return self._database[DatabaseConstants.USERS_COLLECTION]

    @staticmethod
    def _to_record(document: Mapping[str, Any]) -> UserRecord:
        """Convert a raw document (with `_id`) to a UserRecord."""
        data: Dict[str, Any] = dict(document)
        data["id"] = str(data.pop("_id"))
        return UserRecord.model_validate(data)

    def _store_error(self, action: str, exc: Exception) -> StoreError:
        logger.error(f"MongoDB operation '{action}' failed: {exc}")
        return StoreError(
            message=f"Failed to {action} MongoDB",
            detail=str(exc),
        )

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        """Map driver exceptions onto the error taxonomy."""
        try:
            yield
        except mongo_errors.DuplicateKeyError:
            raise DuplicateKeyError() from None
        except mongo_errors.OperationFailure as exc:
            if exc.code == DatabaseConstants.MONGO_DUPLICATE_KEY_CODE:
                raise DuplicateKeyError() from None
            raise self._store_error(action, exc) from exc
        except mongo_errors.PyMongoError as exc:
            raise self._store_error(action, exc) from exc

    async def _ensure_indexes(self) -> None:
        await self._users.create_index(
            "email",
            unique=True,
            name="email_unique",
        )
        await self._users.create_index(
            [("name", ASCENDING), ("age", DESCENDING)],
            name="name_age",
        )

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        """
        Initialize MongoDB connection.

        Creates the Motor client (unless one was injected), verifies it
        with a ping and ensures the users indexes exist.
        """
        if self._database is not None:
            return

        try:
            if self._client is None:
                self._client = AsyncIOMotorClient(
                    self._connection_url,
                    maxPoolSize=self._pool_size,
                    minPoolSize=1,
                    maxIdleTimeMS=self._pool_timeout * 1000,
                    serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                    tz_aware=True,
                )
                await self._client.admin.command("ping")

            self._database = self._client[self._database_name]
            await self._ensure_indexes()

            logger.info(f"MongoDB adapter connected to {self._database_name}")

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            self._database = None
            raise StoreConnectionError(
                message="MongoDB connection failed",
                detail=str(e),
            ) from e

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None
        self._database = None
        logger.info("MongoDB adapter disconnected")

    async def health_check(self) -> bool:
        """
        Verify database connectivity.

        Returns:
            True if connection is healthy
        """
        if self._database is None:
            return False
        try:
            await self._database.command("ping")
            return True
        except Exception as e:
            logger.warning(f"MongoDB health check failed: {e}")
            return False

    # ==========================================================================
    # IDENTIFIERS
    # ==========================================================================

    def parse_id(self, raw_id: Any) -> ObjectId:
        """Accept an ObjectId or its 24-hex string form."""
        if isinstance(raw_id, ObjectId):
            return raw_id
        if isinstance(raw_id, str) and ObjectId.is_valid(raw_id):
            return ObjectId(raw_id)
        raise InvalidIdError(raw_id)

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    async def list_all(self) -> List[UserRecord]:
        """Retrieve all documents in natural order."""
        users = self._users
        with self._translate_errors("fetch users from"):
            documents = await users.find({}).to_list(length=None)
        return [self._to_record(doc) for doc in documents]

    async def get_by_id(self, id: Any) -> UserRecord:
        """Retrieve document by ID."""
        object_id = self.parse_id(id)
        users = self._users

        with self._translate_errors("fetch user from"):
            document = await users.find_one({"_id": object_id})

        if document is None:
            raise NotFoundError(id)
        return self._to_record(document)

    async def create(self, payload: Mapping[str, Any]) -> UserRecord:
        """Validate and insert a new document."""
        data = validate_for_create(payload)
        users = self._users

        now = utc_now()
        document = {**data, "createdAt": now, "updatedAt": now}

        with self._translate_errors("create user in"):
            result = await users.insert_one(document)

        document["_id"] = result.inserted_id
        logger.info(f"User saved to MongoDB: {document['email']}")
        return self._to_record(document)

    async def update(self, id: Any, payload: Mapping[str, Any]) -> UserRecord:
        """
        Apply supplied fields with $set and return the new document.

        An empty payload still reaches the store so updatedAt is stamped.
        """
        object_id = self.parse_id(id)
        changes = validate_for_update(payload)
        users = self._users

        changes["updatedAt"] = utc_now()

        with self._translate_errors("update user in"):
            document = await users.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )

        if document is None:
            raise NotFoundError(id)
        return self._to_record(document)

    async def delete(self, id: Any) -> UserRecord:
        """Delete a document and return its last state."""
        object_id = self.parse_id(id)
        users = self._users

        with self._translate_errors("delete user from"):
            document = await users.find_one_and_delete({"_id": object_id})

        if document is None:
            raise NotFoundError(id)

        logger.info(f"User deleted from MongoDB: {document.get('email')}")
        return self._to_record(document)
