# ==============================================================================
# MAIN API ROUTER - Route Aggregation
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter

from dualstore.api.endpoints import users_router


def build_api_router(prefix: str) -> APIRouter:
    """Mount every endpoint router under the configured prefix."""
    api_router = APIRouter()
    api_router.include_router(users_router, prefix=prefix)
    return api_router
