"""
Admin user management persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from auth.repository import USER_COLUMNS
from core import db


async def list_users() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {USER_COLUMNS}
        FROM users
        ORDER BY created_at DESC, id DESC
        """
    )


async def get_user(user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def email_taken(email: str, *, exclude_id: int | None = None) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM users
        WHERE lower(email) = lower($1)
          AND ($2::int IS NULL OR id <> $2)
        LIMIT 1
        """,
        email,
        exclude_id,
    )
    return row is not None


async def count_admins() -> int:
    value = await db.fetch_val("SELECT COUNT(*) FROM users WHERE role = 'admin'")
    return int(value or 0)


async def update_user(user_id: int, fields: dict[str, Any]) -> dict | None:
    """
    Update only the given columns. Keys must be trusted column names.
    """
    assignments = [f"{column} = ${index}" for index, column in enumerate(fields, start=2)]
    assignments.append("updated_at = now()")
    return await db.fetch_one(
        f"""
        UPDATE users
        SET {", ".join(assignments)}
        WHERE id = $1
        RETURNING {USER_COLUMNS}
        """,
        user_id,
        *fields.values(),
    )


async def delete_user(user_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM users WHERE id = $1 RETURNING id", user_id)
    return row is not None
