"""
Navigation menu endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/menu_items")

admin = [Depends(auth_dependencies.require_admin)]


@router.get("")
async def list_items(active_only: bool = Query(default=False)) -> list[dict]:
    return await service.list_items(active_only=active_only)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=admin)
async def create_item(payload: schemas.CreateMenuItemRequest) -> dict:
    return await service.create_item(payload)


@router.put("/reorder", dependencies=admin)
async def reorder(items: list[schemas.MenuPosition]) -> dict:
    return await service.reorder(items)


@router.put("/{item_id}", dependencies=admin)
async def update_item(item_id: int, payload: schemas.UpdateMenuItemRequest) -> dict:
    return await service.update_item(item_id, payload)


@router.delete("/{item_id}", dependencies=admin)
async def delete_item(item_id: int) -> dict:
    return await service.delete_item(item_id)
