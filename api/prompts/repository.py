"""
AI prompt persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_prompts() -> list[dict]:
    return await db.fetch_all("SELECT * FROM prompts ORDER BY type, name")


async def get_prompt(prompt_id: int) -> dict | None:
    return await db.fetch_one("SELECT * FROM prompts WHERE id = $1", prompt_id)


async def get_latest_by_type(prompt_type: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT *
        FROM prompts
        WHERE type = $1
        ORDER BY updated_at DESC, id DESC
        LIMIT 1
        """,
        prompt_type,
    )


async def count_prompts() -> int:
    value = await db.fetch_val("SELECT COUNT(*) FROM prompts")
    return int(value or 0)


async def create_prompt(*, name: str, prompt_type: str, content: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO prompts (name, type, content)
        VALUES ($1, $2, $3)
        RETURNING *
        """,
        name,
        prompt_type,
        content,
    )
    if row is None:
        raise RuntimeError("Failed to create prompt.")
    return row


async def update_prompt(prompt_id: int, fields: dict[str, Any]) -> dict | None:
    """
    Update only the given columns. Keys must be trusted column names.
    """
    assignments = [f"{column} = ${index}" for index, column in enumerate(fields, start=2)]
    assignments.append("updated_at = now()")
    return await db.fetch_one(
        f"""
        UPDATE prompts
        SET {", ".join(assignments)}
        WHERE id = $1
        RETURNING *
        """,
        prompt_id,
        *fields.values(),
    )


async def delete_prompt(prompt_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM prompts WHERE id = $1 RETURNING id", prompt_id)
    return row is not None
