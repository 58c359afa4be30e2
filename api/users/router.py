"""
Admin user management endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/users", dependencies=[Depends(auth_dependencies.require_admin)])


@router.get("")
async def list_users() -> list[dict]:
    return await service.list_users()


@router.get("/{user_id}")
async def get_user(user_id: int) -> dict:
    return await service.get_user(user_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(payload: schemas.CreateUserRequest) -> dict:
    return await service.create_user(payload)


@router.put("/{user_id}")
async def update_user(user_id: int, payload: schemas.UpdateUserRequest) -> dict:
    return await service.update_user(user_id, payload)


@router.delete("/{user_id}")
async def delete_user(user_id: int) -> dict:
    return await service.delete_user(user_id)
