"""
Content page endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/content_pages")

admin = [Depends(auth_dependencies.require_admin)]


@router.get("")
async def list_pages() -> list[dict]:
    return await service.list_pages()


@router.get("/slug/{slug}")
async def get_page_by_slug(slug: str) -> dict:
    return await service.get_published_by_slug(slug)


@router.get("/{page_id}")
async def get_page(page_id: int) -> dict:
    return await service.get_page(page_id)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=admin)
async def create_page(payload: schemas.ContentPageRequest) -> dict:
    return await service.create_page(payload)


@router.put("/{page_id}", dependencies=admin)
async def update_page(page_id: int, payload: schemas.ContentPageRequest) -> dict:
    return await service.update_page(page_id, payload)


@router.delete("/{page_id}", dependencies=admin)
async def delete_page(page_id: int) -> dict:
    return await service.delete_page(page_id)
