"""
Navigation menu persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_items(*, active_only: bool = False) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT *
        FROM menu_items
        WHERE ($1::boolean IS FALSE OR is_active = TRUE)
        ORDER BY position, id
        """,
        active_only,
    )


async def get_item(item_id: int) -> dict | None:
    return await db.fetch_one("SELECT * FROM menu_items WHERE id = $1", item_id)


async def create_item(fields: dict[str, Any]) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO menu_items (label, url, position, parent_id, target, is_active)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING *
        """,
        fields["label"],
        fields["url"],
        fields["position"],
        fields["parent_id"],
        fields["target"],
        fields["is_active"],
    )
    if row is None:
        raise RuntimeError("Failed to create menu item.")
    return row


async def update_item(item_id: int, fields: dict[str, Any]) -> dict | None:
    """
    Update only the given columns. Keys must be trusted column names.
    """
    assignments = [f"{column} = ${index}" for index, column in enumerate(fields, start=2)]
    assignments.append("updated_at = now()")
    return await db.fetch_one(
        f"""
        UPDATE menu_items
        SET {", ".join(assignments)}
        WHERE id = $1
        RETURNING *
        """,
        item_id,
        *fields.values(),
    )


async def in_subtree(root_id: int, candidate_id: int) -> bool:
    value = await db.fetch_val(
        """
        WITH RECURSIVE subtree AS (
            SELECT id FROM menu_items WHERE id = $1
            UNION
            SELECT m.id FROM menu_items m JOIN subtree s ON m.parent_id = s.id
        )
        SELECT EXISTS (SELECT 1 FROM subtree WHERE id = $2)
        """,
        root_id,
        candidate_id,
    )
    return bool(value)


async def delete_item(item_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM menu_items WHERE id = $1 RETURNING id", item_id)
    return row is not None


async def reorder(positions: list[tuple[int, int]]) -> int:
    """
    Apply (id, position) pairs atomically. Returns the number of rows touched.
    """
    updated = 0
    async with db.transaction() as conn:
        for item_id, position in positions:
            row = await db.fetch_one(
                """
                UPDATE menu_items
                SET position = $2, updated_at = now()
                WHERE id = $1
                RETURNING id
                """,
                item_id,
                position,
                conn=conn,
            )
            if row is not None:
                updated += 1
    return updated
