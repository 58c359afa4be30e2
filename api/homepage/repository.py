"""
Homepage content persistence (raw SQL).

Rows are keyed by (section_id, content_key); writes are upserts.
"""

from __future__ import annotations

import asyncpg

from core import db

UPSERT_SQL = """
    INSERT INTO homepage_content (section_id, content_key, content)
    VALUES ($1, $2, $3)
    ON CONFLICT (section_id, content_key) DO UPDATE
    SET content = EXCLUDED.content, updated_at = now()
    RETURNING id, section_id, content_key, content, updated_at
"""


async def list_content() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, section_id, content_key, content, updated_at
        FROM homepage_content
        ORDER BY section_id, content_key
        """
    )


async def count_content() -> int:
    value = await db.fetch_val("SELECT COUNT(*) FROM homepage_content")
    return int(value or 0)


async def upsert(
    section_id: str,
    content_key: str,
    content: str,
    *,
    conn: asyncpg.Connection | None = None,
) -> dict:
    row = await db.fetch_one(UPSERT_SQL, section_id, content_key, content, conn=conn)
    if row is None:
        raise RuntimeError("Failed to save homepage content.")
    return row


async def upsert_many(items: list[tuple[str, str, str]]) -> list[dict]:
    rows: list[dict] = []
    async with db.transaction() as conn:
        for section_id, content_key, content in items:
            rows.append(await upsert(section_id, content_key, content, conn=conn))
    return rows
