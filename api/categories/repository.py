"""
Category and listing/category association persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db
from core.pagination import Page


async def list_categories() -> list[dict]:
    return await db.fetch_all("SELECT * FROM categories ORDER BY name")


async def list_categories_with_counts() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT c.*, COUNT(l.id) AS listing_count
        FROM categories c
        LEFT JOIN listing_categories lc ON c.id = lc.category_id
        LEFT JOIN listings l ON lc.listing_id = l.id AND l.is_approved = TRUE
        GROUP BY c.id
        ORDER BY c.name
        """
    )


async def get_category(category_id: int) -> dict | None:
    return await db.fetch_one("SELECT * FROM categories WHERE id = $1", category_id)


async def get_category_by_slug(slug: str) -> dict | None:
    return await db.fetch_one("SELECT * FROM categories WHERE slug = $1", slug)


async def slug_taken(slug: str, *, exclude_id: int | None = None) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM categories
        WHERE slug = $1
          AND ($2::int IS NULL OR id <> $2)
        LIMIT 1
        """,
        slug,
        exclude_id,
    )
    return row is not None


async def create_category(
    *,
    name: str,
    slug: str,
    description: str | None,
    icon: str | None,
    parent_id: int | None,
    is_active: bool,
) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO categories (name, slug, description, icon, parent_id, is_active)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING *
        """,
        name,
        slug,
        description,
        icon,
        parent_id,
        is_active,
    )
    if row is None:
        raise RuntimeError("Failed to create category.")
    return row


async def update_category(category_id: int, fields: dict[str, Any]) -> dict | None:
    """
    Update only the given columns. Keys must be trusted column names.
    """
    assignments = [f"{column} = ${index}" for index, column in enumerate(fields, start=2)]
    assignments.append("updated_at = now()")
    return await db.fetch_one(
        f"""
        UPDATE categories
        SET {", ".join(assignments)}
        WHERE id = $1
        RETURNING *
        """,
        category_id,
        *fields.values(),
    )


async def has_children(category_id: int) -> bool:
    row = await db.fetch_one("SELECT 1 AS ok FROM categories WHERE parent_id = $1 LIMIT 1", category_id)
    return row is not None


async def in_subtree(root_id: int, candidate_id: int) -> bool:
    """
    True when `candidate_id` is `root_id` itself or one of its descendants.
    """
    value = await db.fetch_val(
        """
        WITH RECURSIVE subtree AS (
            SELECT id FROM categories WHERE id = $1
            UNION
            SELECT c.id FROM categories c JOIN subtree s ON c.parent_id = s.id
        )
        SELECT EXISTS (SELECT 1 FROM subtree WHERE id = $2)
        """,
        root_id,
        candidate_id,
    )
    return bool(value)


async def is_in_use(category_id: int) -> bool:
    row = await db.fetch_one("SELECT 1 AS ok FROM listing_categories WHERE category_id = $1 LIMIT 1", category_id)
    return row is not None


async def delete_category(category_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM categories WHERE id = $1 RETURNING id", category_id)
    return row is not None


async def list_listings_in_category(category_id: int, page: Page) -> tuple[list[dict], int]:
    total = await db.fetch_val(
        """
        SELECT COUNT(*)
        FROM listings l
        JOIN listing_categories lc ON l.id = lc.listing_id
        WHERE lc.category_id = $1 AND l.is_approved = TRUE
        """,
        category_id,
    )
    rows = await db.fetch_all(
        """
        SELECT l.*
        FROM listings l
        JOIN listing_categories lc ON l.id = lc.listing_id
        WHERE lc.category_id = $1 AND l.is_approved = TRUE
        ORDER BY l.name
        LIMIT $2 OFFSET $3
        """,
        category_id,
        page.page_size,
        page.offset,
    )
    return rows, int(total or 0)


async def listing_exists(listing_id: int) -> bool:
    row = await db.fetch_one("SELECT 1 AS ok FROM listings WHERE id = $1", listing_id)
    return row is not None


async def associate(listing_id: int, category_id: int, *, is_primary: bool) -> None:
    async with db.transaction() as conn:
        if is_primary:
            await db.execute(
                "UPDATE listing_categories SET is_primary = FALSE WHERE listing_id = $1",
                listing_id,
                conn=conn,
            )
        await db.execute(
            """
            INSERT INTO listing_categories (listing_id, category_id, is_primary)
            VALUES ($1, $2, $3)
            ON CONFLICT (listing_id, category_id) DO UPDATE
            SET is_primary = EXCLUDED.is_primary
            """,
            listing_id,
            category_id,
            is_primary,
            conn=conn,
        )


async def dissociate(listing_id: int, category_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM listing_categories
        WHERE listing_id = $1 AND category_id = $2
        RETURNING listing_id
        """,
        listing_id,
        category_id,
    )
    return row is not None
