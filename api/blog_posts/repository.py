"""
Blog post persistence (raw SQL).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from core import db

POST_FIELDS = [
    "title",
    "slug",
    "content",
    "excerpt",
    "featured_image_url",
    "author",
    "meta_title",
    "meta_description",
    "status",
]


async def list_posts(*, status: str | None = None) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT *
        FROM blog_posts
        WHERE ($1::text IS NULL OR status = $1)
        ORDER BY updated_at DESC, id DESC
        """,
        status,
    )


async def get_post(post_id: int) -> dict | None:
    return await db.fetch_one("SELECT * FROM blog_posts WHERE id = $1", post_id)


async def get_published_by_slug(slug: str) -> dict | None:
    return await db.fetch_one(
        "SELECT * FROM blog_posts WHERE slug = $1 AND status = 'published'",
        slug,
    )


async def slug_taken(slug: str, *, exclude_id: int | None = None) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM blog_posts
        WHERE slug = $1
          AND ($2::int IS NULL OR id <> $2)
        LIMIT 1
        """,
        slug,
        exclude_id,
    )
    return row is not None


async def create_post(fields: dict[str, Any], *, published_at: datetime | None) -> dict:
    values = [fields.get(name) for name in POST_FIELDS]
    row = await db.fetch_one(
        f"""
        INSERT INTO blog_posts ({", ".join(POST_FIELDS)}, published_at)
        VALUES ({", ".join(f"${i}" for i in range(1, len(POST_FIELDS) + 2))})
        RETURNING *
        """,
        *values,
        published_at,
    )
    if row is None:
        raise RuntimeError("Failed to create blog post.")
    return row


async def update_post(post_id: int, fields: dict[str, Any], *, published_at: datetime | None) -> dict | None:
    assignments = [f"{name} = ${i}" for i, name in enumerate(POST_FIELDS, start=2)]
    assignments.append(f"published_at = ${len(POST_FIELDS) + 2}")
    assignments.append("updated_at = now()")
    return await db.fetch_one(
        f"""
        UPDATE blog_posts
        SET {", ".join(assignments)}
        WHERE id = $1
        RETURNING *
        """,
        post_id,
        *[fields.get(name) for name in POST_FIELDS],
        published_at,
    )


async def delete_post(post_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM blog_posts WHERE id = $1 RETURNING id", post_id)
    return row is not None
