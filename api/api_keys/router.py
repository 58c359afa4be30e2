"""
Third-party API key endpoints (admin).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/api-keys", dependencies=[Depends(auth_dependencies.require_admin)])


@router.get("")
async def list_keys() -> list[dict]:
    return await service.list_keys()


@router.get("/{service_name}")
async def get_key(service_name: str) -> dict:
    return await service.get_key(service_name)


@router.post("")
async def upsert_key(payload: schemas.UpsertApiKeyRequest) -> dict:
    return await service.upsert_key(payload)


@router.delete("/{key_id}")
async def delete_key(key_id: int) -> dict:
    return await service.delete_key(key_id)
