"""
Homepage content endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/homepage")


@router.get("")
async def get_content(grouped: bool = Query(default=False)) -> Any:
    return await service.get_content(grouped=grouped)


@router.put("", dependencies=[Depends(auth_dependencies.require_admin)])
async def update_content(payload: schemas.HomepageUpdateRequest) -> dict:
    return await service.update_content(payload)
