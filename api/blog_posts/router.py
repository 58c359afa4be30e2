"""
Blog post endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/blog_posts")

admin = [Depends(auth_dependencies.require_admin)]


@router.get("")
async def list_posts(post_status: schemas.PostStatus | None = Query(default=None, alias="status")) -> list[dict]:
    return await service.list_posts(post_status)


@router.get("/slug/{slug}")
async def get_post_by_slug(slug: str) -> dict:
    return await service.get_published_by_slug(slug)


@router.get("/{post_id}")
async def get_post(post_id: int) -> dict:
    return await service.get_post(post_id)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=admin)
async def create_post(payload: schemas.BlogPostRequest) -> dict:
    return await service.create_post(payload)


@router.put("/{post_id}", dependencies=admin)
async def update_post(post_id: int, payload: schemas.BlogPostRequest) -> dict:
    return await service.update_post(post_id, payload)


@router.delete("/{post_id}", dependencies=admin)
async def delete_post(post_id: int) -> dict:
    return await service.delete_post(post_id)
