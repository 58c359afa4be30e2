"""
Lead persistence (raw SQL).

`listings.has_unread_leads` mirrors "this listing has at least one lead with
status 'new'". Every write that can change that fact recomputes the flag on
the same connection/transaction.
"""

from __future__ import annotations

import asyncpg

from core import db
from core.pagination import Page

LEAD_SELECT = """
    SELECT le.id, le.listing_id, le.name, le.email, le.message, le.status,
           le.created_at, l.name AS listing_name
    FROM leads le
    LEFT JOIN listings l ON l.id = le.listing_id
"""


def build_list_where(*, status: str | None, listing_id: int | None, search: str) -> tuple[str, list]:
    """
    Return the WHERE clause and its positional args for the lead list query.
    """
    clauses: list[str] = []
    args: list = []
    if status:
        args.append(status)
        clauses.append(f"le.status = ${len(args)}")
    if listing_id is not None:
        args.append(listing_id)
        clauses.append(f"le.listing_id = ${len(args)}")
    if search:
        args.append(f"%{search}%")
        n = len(args)
        clauses.append(
            f"(le.name ILIKE ${n} OR le.email ILIKE ${n} OR le.message ILIKE ${n} OR l.name ILIKE ${n})"
        )
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, args


async def listing_exists(listing_id: int, *, conn: asyncpg.Connection | None = None) -> bool:
    row = await db.fetch_one("SELECT 1 AS ok FROM listings WHERE id = $1", listing_id, conn=conn)
    return row is not None


async def create_lead(*, listing_id: int, name: str, email: str, message: str) -> dict | None:
    """
    Insert a lead and flag its listing as having unread leads.

    Returns None when the listing does not exist.
    """
    async with db.transaction() as conn:
        if not await listing_exists(listing_id, conn=conn):
            return None
        row = await db.fetch_one(
            """
            INSERT INTO leads (listing_id, name, email, message, status)
            VALUES ($1, $2, $3, $4, 'new')
            RETURNING id, created_at
            """,
            listing_id,
            name,
            email,
            message,
            conn=conn,
        )
        await db.execute(
            "UPDATE listings SET has_unread_leads = TRUE WHERE id = $1",
            listing_id,
            conn=conn,
        )
    return row


async def list_leads(
    page: Page,
    *,
    status: str | None = None,
    listing_id: int | None = None,
    search: str = "",
) -> tuple[list[dict], int]:
    where, args = build_list_where(status=status, listing_id=listing_id, search=search)
    total = await db.fetch_val(
        f"""
        SELECT COUNT(*)
        FROM leads le
        LEFT JOIN listings l ON l.id = le.listing_id
        {where}
        """,
        *args,
    )
    n = len(args)
    rows = await db.fetch_all(
        f"""
        {LEAD_SELECT}
        {where}
        ORDER BY le.created_at DESC, le.id DESC
        LIMIT ${n + 1} OFFSET ${n + 2}
        """,
        *args,
        page.page_size,
        page.offset,
    )
    return rows, int(total or 0)


async def lead_stats() -> dict:
    row = await db.fetch_one(
        """
        SELECT
            COUNT(*) FILTER (WHERE status = 'new') AS new_count,
            COUNT(*) FILTER (WHERE status = 'read') AS read_count,
            COUNT(*) FILTER (WHERE status = 'replied') AS replied_count,
            COUNT(*) FILTER (WHERE status = 'archived') AS archived_count,
            COUNT(*) AS total_count
        FROM leads
        """
    )
    return {key: int(value or 0) for key, value in (row or {}).items()}


async def get_lead(lead_id: int) -> dict | None:
    return await db.fetch_one(f"{LEAD_SELECT} WHERE le.id = $1", lead_id)


async def refresh_unread_flag(conn: asyncpg.Connection, listing_ids: list[int]) -> None:
    if not listing_ids:
        return None
    await db.execute(
        """
        UPDATE listings l
        SET has_unread_leads = EXISTS (
            SELECT 1 FROM leads le WHERE le.listing_id = l.id AND le.status = 'new'
        )
        WHERE l.id = ANY($1::int[])
        """,
        listing_ids,
        conn=conn,
    )


async def update_status(lead_id: int, status: str) -> dict | None:
    async with db.transaction() as conn:
        row = await db.fetch_one(
            """
            UPDATE leads
            SET status = $2
            WHERE id = $1
            RETURNING id, listing_id, name, email, message, status, created_at
            """,
            lead_id,
            status,
            conn=conn,
        )
        if row is not None:
            await refresh_unread_flag(conn, [int(row["listing_id"])])
    return row


async def bulk_update_status(lead_ids: list[int], status: str) -> list[dict]:
    async with db.transaction() as conn:
        rows = await db.fetch_all(
            """
            UPDATE leads
            SET status = $2
            WHERE id = ANY($1::int[])
            RETURNING id, listing_id, status
            """,
            lead_ids,
            status,
            conn=conn,
        )
        await refresh_unread_flag(conn, sorted({int(r["listing_id"]) for r in rows}))
    return rows


async def delete_lead(lead_id: int) -> bool:
    async with db.transaction() as conn:
        row = await db.fetch_one(
            "DELETE FROM leads WHERE id = $1 RETURNING listing_id",
            lead_id,
            conn=conn,
        )
        if row is not None:
            await refresh_unread_flag(conn, [int(row["listing_id"])])
    return row is not None
