# ==============================================================================
# ADAPTER REGISTRY - Adapter Instantiation & Lifecycle Management
# ==============================================================================
# Builds one adapter per backend tag, connects them once at startup and
# disconnects them once at shutdown. Lives on app.state, never global.
# ==============================================================================

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

from dualstore.core.constants import Backend
from dualstore.core.exceptions import StoreConnectionError
from dualstore.core.settings import Settings
from dualstore.database.adapters.base_adapter import BaseUserAdapter
from dualstore.database.adapters.mongodb_adapter import MongoDBAdapter
from dualstore.database.adapters.postgresql_adapter import PostgreSQLAdapter

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    Owns the adapter for every supported backend.

    Features:
        - Adapter creation from Settings (or injection for tests)
        - Init-once / teardown-once lifecycle
        - Lookup by backend tag taken from the request path
        - Aggregated health check

    Example:
        >>> registry = AdapterRegistry(settings)
        >>> await registry.initialize()
        >>> adapter = registry.get_adapter("mongo")
        >>> users = await adapter.list_all()
        >>> await registry.shutdown()
    """

    def __init__(
        self,
        settings: Settings,
        adapters: Optional[Dict[Backend, BaseUserAdapter]] = None,
    ) -> None:
        """
        Args:
            settings: Source of connection options
            adapters: Pre-built adapters keyed by backend; any backend
                missing here is created from settings
        """
        self._settings = settings
        self._adapters: Dict[Backend, BaseUserAdapter] = dict(adapters or {})
        self._initialized = False

        for backend in Backend:
            if backend not in self._adapters:
                self._adapters[backend] = self.create_adapter(backend)

    def create_adapter(self, backend: Backend) -> BaseUserAdapter:
        """
        Create the adapter for a backend from settings.

        Raises:
            ValueError: If backend is not supported
        """
        adapter: BaseUserAdapter

        if backend == Backend.MONGO:
            adapter = MongoDBAdapter(
                connection_url=self._settings.MONGODB_URL,
                database_name=self._settings.MONGODB_DB,
                pool_size=self._settings.DB_POOL_SIZE,
                pool_timeout=self._settings.DB_POOL_TIMEOUT,
                server_selection_timeout_ms=(
                    self._settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS
                ),
            )
            logger.info("Created MongoDB adapter")

        elif backend == Backend.POSTGRES:
            adapter = PostgreSQLAdapter(
                database_url=self._settings.relational_url,
                pool_size=self._settings.DB_POOL_SIZE,
                max_overflow=self._settings.DB_MAX_OVERFLOW,
                pool_timeout=self._settings.DB_POOL_TIMEOUT,
                pool_recycle=self._settings.DB_POOL_RECYCLE,
                echo=self._settings.SQL_ECHO,
            )
            logger.info("Created PostgreSQL adapter")

        else:
            raise ValueError(f"Unsupported backend: {backend}")

        return adapter

    # ==========================================================================
    # LIFECYCLE
    # ==========================================================================

    async def initialize(self) -> None:
        """
        Connect every adapter. Repeated calls are no-ops.

        Raises:
            StoreConnectionError: If any store cannot be reached
        """
        if self._initialized:
            return

        connected: List[Backend] = []
        for backend, adapter in self._adapters.items():
            try:
                await adapter.connect()
            except Exception as e:
                logger.error(f"Initialization of {backend.value} failed: {e}")
                await self._disconnect_all(connected)
                if isinstance(e, StoreConnectionError):
                    raise
                raise StoreConnectionError(
                    message=f"Failed to initialize {adapter.store_label}",
                    detail=str(e),
                ) from e
            connected.append(backend)

        self._initialized = True
        logger.info(
            "Stores initialized: "
            + ", ".join(backend.value for backend in self._adapters)
        )

    async def shutdown(self) -> None:
        """Disconnect every adapter. Repeated calls are no-ops."""
        if not self._initialized:
            return

        await self._disconnect_all(list(self._adapters))
        self._initialized = False
        logger.info("All store connections closed")

    async def _disconnect_all(self, backends: List[Backend]) -> None:
        for backend in backends:
            try:
                await self._adapters[backend].disconnect()
                logger.info(f"Disconnected: {backend.value}")
            except Exception as e:
                logger.error(f"Error disconnecting {backend.value}: {e}")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    # ==========================================================================
    # LOOKUP
    # ==========================================================================

    def get_adapter(self, backend: Union[Backend, str]) -> BaseUserAdapter:
        """
        Resolve a backend tag to its adapter.

        Raises:
            KeyError: If the tag names no supported backend
        """
        try:
            return self._adapters[Backend(backend)]
        except ValueError:
            raise KeyError(backend) from None

    def __contains__(self, backend: object) -> bool:
        try:
            return Backend(backend) in self._adapters
        except ValueError:
            return False

    async def health_check(self) -> Dict[str, bool]:
        """
        Check every store.

        Returns:
            Mapping of backend tag to connectivity flag
        """
        results: Dict[str, bool] = {}
        for backend, adapter in self._adapters.items():
            try:
                results[backend.value] = await adapter.health_check()
            except Exception:
                results[backend.value] = False
        return results
