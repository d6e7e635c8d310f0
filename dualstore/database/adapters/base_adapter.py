# ==============================================================================
# BASE USER ADAPTER - Abstract Interface
# ==============================================================================
# Contract shared by the document-store and relational-store adapters.
# Callers pick an adapter once (by backend tag) and never branch on its type.
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Mapping, TypeVar

from dualstore.core.constants import Backend
from dualstore.schemas.user import UserRecord

# Native identifier type of the store (ObjectId, int)
IdT = TypeVar("IdT")


class BaseUserAdapter(ABC, Generic[IdT]):
    """
    Abstract Base Class for User store adapters.

    Exposes the same five operations over every backend. Concrete
    adapters own one long-lived store client, validate payloads through
    the entity contract, and translate every store-native failure into
    the error taxonomy in dualstore.core.exceptions before it leaves
    the adapter.

    Generic Parameters:
        IdT: Native identifier type produced by parse_id

    Error Contract:
        InvalidIdError: identifier malformed for this store
        NotFoundError: well-formed identifier with no record
        ValidationError: payload breaks the entity contract
        DuplicateKeyError: email already taken in this store
        StoreError: anything else the store reports

    Example:
        >>> adapter = registry.get_adapter("postgres")
        >>> user = await adapter.create({"name": "Bo", "email": "bo@ex.com"})
        >>> await adapter.get_by_id(user.id)
    """

    backend: Backend
    store_label: str

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish the store connection.

        Raises:
            StoreConnectionError: If the store cannot be reached
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the store client and its connection pool."""

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the store connection is healthy.

        Returns:
            True if a lightweight round trip succeeds
        """

    # ==========================================================================
    # IDENTIFIERS
    # ==========================================================================

    @abstractmethod
    def parse_id(self, raw_id: Any) -> IdT:
        """
        Convert a path identifier to the store's native id type.

        Runs before any query so a malformed id is never reported as
        a missing record.

        Raises:
            InvalidIdError: If raw_id is not a valid id for this store
        """

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def list_all(self) -> List[UserRecord]:
        """
        Retrieve every user in the store's natural order.

        Returns:
            List of records, empty if the store holds none
        """

    @abstractmethod
    async def get_by_id(self, id: Any) -> UserRecord:
        """
        Retrieve one user.

        Raises:
            InvalidIdError, NotFoundError
        """

    @abstractmethod
    async def create(self, payload: Mapping[str, Any]) -> UserRecord:
        """
        Validate and insert a user.

        Returns:
            Created record with store-assigned id and timestamps

        Raises:
            ValidationError, DuplicateKeyError
        """

    @abstractmethod
    async def update(self, id: Any, payload: Mapping[str, Any]) -> UserRecord:
        """
        Apply a partial update; unsupplied fields keep their values.

        Returns:
            Record as the store reports it after the write

        Raises:
            InvalidIdError, NotFoundError, ValidationError, DuplicateKeyError
        """

    @abstractmethod
    async def delete(self, id: Any) -> UserRecord:
        """
        Remove a user permanently.

        Returns:
            Snapshot of the deleted record

        Raises:
            InvalidIdError, NotFoundError
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(backend={self.backend.value})>"
