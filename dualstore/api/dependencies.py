# ==============================================================================
# API DEPENDENCIES - Dependency Injection
# ==============================================================================
# FastAPI dependencies resolving the backend path segment to an adapter
# ==============================================================================

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from dualstore.core.exceptions import RouteNotFoundError
from dualstore.database.adapters.base_adapter import BaseUserAdapter
from dualstore.database.registry import AdapterRegistry


# ==============================================================================
# DATABASE DEPENDENCIES
# ==============================================================================

async def get_registry(request: Request) -> AdapterRegistry:
    """Registry created by create_app and stored on app.state."""
    return request.app.state.registry


RegistryDep = Annotated[AdapterRegistry, Depends(get_registry)]


async def get_user_adapter(
    backend: str,
    request: Request,
    registry: RegistryDep,
) -> BaseUserAdapter:
    """
    Resolve the `{backend}` path segment.

    Raises:
        RouteNotFoundError: If no adapter is registered for the tag, so
            /api/users/redis answers like any other unmounted path
    """
    if backend not in registry:
        raise RouteNotFoundError(request.method, request.url.path)
    return registry.get_adapter(backend)


UserAdapterDep = Annotated[BaseUserAdapter, Depends(get_user_adapter)]
