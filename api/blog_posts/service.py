"""
Blog post business logic.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog post not found.")


def resolve_published_at(new_status: str, current: dict | None, *, now: datetime | None = None) -> datetime | None:
    """
    Compute `published_at` for a write.

    - first transition to `published` stamps the current time
    - staying `published` keeps the original timestamp
    - any other status clears it
    """
    if new_status != "published":
        return None
    if current is not None and current.get("status") == "published" and current.get("published_at"):
        return current["published_at"]
    return now or datetime.now(timezone.utc)


def _clean(payload: schemas.BlogPostRequest) -> dict:
    fields = payload.model_dump()
    for key in ("title", "slug", "content"):
        fields[key] = (fields.get(key) or "").strip()
    if not (fields["title"] and fields["slug"] and fields["content"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title, slug, and content are required.",
        )
    return fields


async def list_posts(post_status: str | None = None) -> list[dict]:
    return await repository.list_posts(status=post_status or None)


async def get_post(post_id: int) -> dict:
    row = await repository.get_post(post_id)
    if row is None:
        raise _not_found()
    return row


async def get_published_by_slug(slug: str) -> dict:
    row = await repository.get_published_by_slug(slug)
    if row is None:
        raise _not_found()
    return row


async def create_post(payload: schemas.BlogPostRequest) -> dict:
    fields = _clean(payload)
    if await repository.slug_taken(fields["slug"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A blog post with this slug already exists.",
        )

    row = await repository.create_post(fields, published_at=resolve_published_at(fields["status"], None))
    logger.info("blog_post_created id=%s status=%s", row["id"], row["status"])
    return row


async def update_post(post_id: int, payload: schemas.BlogPostRequest) -> dict:
    fields = _clean(payload)
    current = await get_post(post_id)
    if await repository.slug_taken(fields["slug"], exclude_id=post_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A blog post with this slug already exists.",
        )

    row = await repository.update_post(
        post_id,
        fields,
        published_at=resolve_published_at(fields["status"], current),
    )
    if row is None:
        raise _not_found()
    return row


async def delete_post(post_id: int) -> dict:
    if not await repository.delete_post(post_id):
        raise _not_found()
    logger.info("blog_post_deleted id=%s", post_id)
    return {"message": "Blog post deleted successfully"}
