"""
Third-party API key persistence (raw SQL).

Secret values only leave this module through `get_by_service` and
`get_active_secret`; listings and upserts return metadata columns.
"""

from __future__ import annotations

from core import db

PUBLIC_COLUMNS = "id, service_name, is_active, created_at, updated_at"


async def list_keys() -> list[dict]:
    return await db.fetch_all(f"SELECT {PUBLIC_COLUMNS} FROM api_keys ORDER BY service_name")


async def get_by_service(service_name: str) -> dict | None:
    return await db.fetch_one(
        f"SELECT {PUBLIC_COLUMNS}, api_key FROM api_keys WHERE service_name = $1",
        service_name,
    )


async def upsert_key(*, service_name: str, api_key: str, is_active: bool) -> dict:
    """
    Insert or replace the key for a service. `created` is TRUE on insert.
    """
    row = await db.fetch_one(
        f"""
        INSERT INTO api_keys (service_name, api_key, is_active)
        VALUES ($1, $2, $3)
        ON CONFLICT (service_name) DO UPDATE
        SET api_key = EXCLUDED.api_key,
            is_active = EXCLUDED.is_active,
            updated_at = now()
        RETURNING {PUBLIC_COLUMNS}, (xmax = 0) AS created
        """,
        service_name,
        api_key,
        is_active,
    )
    if row is None:
        raise RuntimeError("Failed to save API key.")
    return row


async def delete_key(key_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM api_keys WHERE id = $1 RETURNING id", key_id)
    return row is not None


async def get_active_secret(service_name: str) -> str | None:
    value = await db.fetch_val(
        "SELECT api_key FROM api_keys WHERE service_name = $1 AND is_active = TRUE",
        service_name,
    )
    return str(value) if value else None
