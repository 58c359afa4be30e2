"""
Content page persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

PAGE_FIELDS = ["title", "slug", "content", "featured_photo_url", "meta_title", "meta_description", "status"]


async def list_pages() -> list[dict]:
    return await db.fetch_all("SELECT * FROM content_pages ORDER BY updated_at DESC, id DESC")


async def get_page(page_id: int) -> dict | None:
    return await db.fetch_one("SELECT * FROM content_pages WHERE id = $1", page_id)


async def get_published_by_slug(slug: str) -> dict | None:
    return await db.fetch_one(
        "SELECT * FROM content_pages WHERE slug = $1 AND status = 'published'",
        slug,
    )


async def slug_taken(slug: str, *, exclude_id: int | None = None) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM content_pages
        WHERE slug = $1
          AND ($2::int IS NULL OR id <> $2)
        LIMIT 1
        """,
        slug,
        exclude_id,
    )
    return row is not None


async def create_page(fields: dict[str, Any]) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO content_pages ({", ".join(PAGE_FIELDS)})
        VALUES ({", ".join(f"${i}" for i in range(1, len(PAGE_FIELDS) + 1))})
        RETURNING *
        """,
        *[fields.get(name) for name in PAGE_FIELDS],
    )
    if row is None:
        raise RuntimeError("Failed to create content page.")
    return row


async def update_page(page_id: int, fields: dict[str, Any]) -> dict | None:
    assignments = [f"{name} = ${i}" for i, name in enumerate(PAGE_FIELDS, start=2)]
    assignments.append("updated_at = now()")
    return await db.fetch_one(
        f"""
        UPDATE content_pages
        SET {", ".join(assignments)}
        WHERE id = $1
        RETURNING *
        """,
        page_id,
        *[fields.get(name) for name in PAGE_FIELDS],
    )


async def delete_page(page_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM content_pages WHERE id = $1 RETURNING id", page_id)
    return row is not None
