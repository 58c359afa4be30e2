"""
Site settings endpoints. Reads are public so the storefront can render
titles, SEO tags and header scripts.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/settings")


@router.get("")
async def get_settings() -> dict:
    return await service.get_settings()


@router.patch("", dependencies=[Depends(auth_dependencies.require_admin)])
async def update_settings(payload: schemas.SiteSettingsPatch) -> dict:
    return await service.update_settings(payload)
