"""
Content page (CMS page) business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content page not found.")


def _duplicate_slug() -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A page with this slug already exists.")


def _clean(payload: schemas.ContentPageRequest) -> dict:
    fields = payload.model_dump()
    for key in ("title", "slug", "content"):
        fields[key] = (fields.get(key) or "").strip()
    if not (fields["title"] and fields["slug"] and fields["content"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title, slug, and content are required.",
        )
    return fields


async def list_pages() -> list[dict]:
    return await repository.list_pages()


async def get_page(page_id: int) -> dict:
    row = await repository.get_page(page_id)
    if row is None:
        raise _not_found()
    return row


async def get_published_by_slug(slug: str) -> dict:
    row = await repository.get_published_by_slug(slug)
    if row is None:
        raise _not_found()
    return row


async def create_page(payload: schemas.ContentPageRequest) -> dict:
    fields = _clean(payload)
    if await repository.slug_taken(fields["slug"]):
        raise _duplicate_slug()
    row = await repository.create_page(fields)
    logger.info("content_page_created id=%s slug=%s", row["id"], row["slug"])
    return row


async def update_page(page_id: int, payload: schemas.ContentPageRequest) -> dict:
    fields = _clean(payload)
    await get_page(page_id)
    if await repository.slug_taken(fields["slug"], exclude_id=page_id):
        raise _duplicate_slug()
    row = await repository.update_page(page_id, fields)
    if row is None:
        raise _not_found()
    return row


async def delete_page(page_id: int) -> dict:
    if not await repository.delete_page(page_id):
        raise _not_found()
    logger.info("content_page_deleted id=%s", page_id)
    return {"message": "Content page deleted successfully"}
