"""
Site settings persistence (raw SQL).

One jsonb row per settings group (general, seo, scripts, appearance).
Partial writes merge into the stored object with jsonb `||`.
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_groups() -> list[dict]:
    return await db.fetch_all("SELECT group_name, value FROM site_settings ORDER BY group_name")


async def merge_groups(groups: dict[str, dict[str, Any]]) -> None:
    async with db.transaction() as conn:
        for group_name, values in groups.items():
            await db.execute(
                """
                INSERT INTO site_settings (group_name, value)
                VALUES ($1, $2)
                ON CONFLICT (group_name) DO UPDATE
                SET value = site_settings.value || EXCLUDED.value, updated_at = now()
                """,
                group_name,
                values,
                conn=conn,
            )


async def insert_missing(groups: dict[str, dict[str, Any]]) -> int:
    inserted = 0
    async with db.transaction() as conn:
        for group_name, values in groups.items():
            row = await db.fetch_one(
                """
                INSERT INTO site_settings (group_name, value)
                VALUES ($1, $2)
                ON CONFLICT (group_name) DO NOTHING
                RETURNING group_name
                """,
                group_name,
                values,
                conn=conn,
            )
            if row is not None:
                inserted += 1
    return inserted
