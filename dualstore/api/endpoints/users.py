# ==============================================================================
# USERS ENDPOINTS - CRUD Routes per Backend
# ==============================================================================
# /users/{backend} and /users/{backend}/{user_id} for backend in mongo|postgres
# ==============================================================================

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from dualstore.api import normalizer
from dualstore.api.dependencies import UserAdapterDep

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/{backend}",
    summary="List users",
    description="Return every user held by the selected store.",
)
async def list_users(adapter: UserAdapterDep) -> JSONResponse:
    users = await adapter.list_all()
    return normalizer.read_many(users)


@router.get(
    "/{backend}/{user_id}",
    summary="Get user by ID",
)
async def get_user(user_id: str, adapter: UserAdapterDep) -> JSONResponse:
    user = await adapter.get_by_id(user_id)
    return normalizer.read_one(user)


@router.post(
    "/{backend}",
    summary="Create user",
    description="Validate and store a new user. Email must be unique per store.",
)
async def create_user(
    adapter: UserAdapterDep,
    payload: Any = Body(None),
) -> JSONResponse:
    """An absent body validates like an empty object."""
    user = await adapter.create({} if payload is None else payload)
    return normalizer.created(user)


@router.put(
    "/{backend}/{user_id}",
    summary="Update user",
    description="Partial update: fields left out of the body keep their values.",
)
async def update_user(
    user_id: str,
    adapter: UserAdapterDep,
    payload: Any = Body(None),
) -> JSONResponse:
    user = await adapter.update(user_id, {} if payload is None else payload)
    return normalizer.updated(user)


@router.delete(
    "/{backend}/{user_id}",
    summary="Delete user",
)
async def delete_user(user_id: str, adapter: UserAdapterDep) -> JSONResponse:
    user = await adapter.delete(user_id)
    return normalizer.deleted(user)
