"""
Listing persistence (raw SQL).

Several deployments of the directory carry slightly different `listings`
schemas, so the admin list and the by-type lookup probe
`information_schema` and only reference columns that exist.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db
from core.pagination import Page

# Always selected first when present.
ESSENTIAL_COLUMNS = ["id", "google_place_id"]

# Selected in this order when present.
OPTIONAL_COLUMNS = [
    "place_id",
    "name",
    "formatted_address",
    "vicinity",
    "latitude",
    "longitude",
    "phone_number",
    "website",
    "rating",
    "user_ratings_total",
    "main_type",
    "types",
    "created_at",
    "updated_at",
    "description",
    "faqs",
    "is_approved",
    "is_featured",
    "featured",
]

SEARCHABLE_COLUMNS = ["google_place_id", "place_id", "name", "formatted_address", "vicinity"]

# Columns a client may write through create/update.
WRITABLE_COLUMNS = [
    "name",
    "google_place_id",
    "formatted_address",
    "latitude",
    "longitude",
    "phone_number",
    "website",
    "main_type",
    "types",
    "description",
    "seo_title",
    "seo_description",
    "seo_keywords",
    "main_image_url",
    "is_featured",
]

CATEGORY_SQL = """
    SELECT c.*, lc.is_primary
    FROM categories c
    JOIN listing_categories lc ON c.id = lc.category_id
    WHERE lc.listing_id = $1
    ORDER BY lc.is_primary DESC, c.name
"""


def select_columns(columns: set[str]) -> list[str]:
    chosen = [c for c in ESSENTIAL_COLUMNS if c in columns]
    chosen += [c for c in OPTIONAL_COLUMNS if c in columns]
    return chosen


def search_columns(columns: set[str]) -> list[str]:
    return [c for c in SEARCHABLE_COLUMNS if c in columns]


def order_by_column(columns: set[str], selected: list[str]) -> str:
    if "name" in columns:
        return "name"
    if "google_place_id" in columns:
        return "google_place_id"
    if selected:
        return selected[0]
    return "id"


def build_admin_list_sql(columns: set[str], *, with_search: bool) -> tuple[str, str]:
    """
    Return (count_sql, page_sql) for the admin listing table.

    With search, `$1` is the ILIKE pattern and limit/offset follow; otherwise
    limit/offset are `$1`/`$2`.
    """
    selected = select_columns(columns)
    select_sql = ", ".join(selected) if selected else "*"

    where = ""
    if with_search:
        searchable = search_columns(columns)
        if searchable:
            where = "WHERE " + " OR ".join(f"{c} ILIKE $1" for c in searchable)

    order_by = order_by_column(columns, selected)
    limit_idx = 2 if where else 1
    count_sql = f"SELECT COUNT(*) FROM listings {where}".strip()
    page_sql = (
        f"SELECT {select_sql} FROM listings {where} "
        f"ORDER BY {order_by} ASC LIMIT ${limit_idx} OFFSET ${limit_idx + 1}"
    )
    return count_sql, page_sql


def build_by_type_where(columns: set[str]) -> str:
    if "types" in columns:
        where = "(main_type = $1 OR $1 = ANY(types))"
    elif "google_categories_json" in columns:
        where = "(main_type = $1 OR google_categories_json::jsonb ? $1)"
    else:
        where = "main_type = $1"
    if "is_approved" in columns:
        where += " AND is_approved = TRUE"
    return where


async def list_admin(page: Page, *, search: str = "") -> tuple[list[dict], int]:
    columns = await db.table_columns("listings")
    term = (search or "").strip()
    count_sql, page_sql = build_admin_list_sql(columns, with_search=bool(term))

    uses_pattern = "$1" in count_sql
    args: list[Any] = [f"%{term}%"] if uses_pattern else []
    total = int(await db.fetch_val(count_sql, *args) or 0)
    rows = await db.fetch_all(page_sql, *args, page.page_size, page.offset)
    return rows, total


async def list_approved(page: Page, *, featured_only: bool = False) -> tuple[list[dict], int]:
    where = "is_approved = TRUE"
    order_by = "is_featured DESC, name"
    if featured_only:
        where += " AND is_featured = TRUE"
        order_by = "name"

    total = int(await db.fetch_val(f"SELECT COUNT(*) FROM listings WHERE {where}") or 0)
    rows = await db.fetch_all(
        f"""
        SELECT *
        FROM listings
        WHERE {where}
        ORDER BY {order_by}
        LIMIT $1 OFFSET $2
        """,
        page.page_size,
        page.offset,
    )
    return rows, total


async def list_by_type(business_type: str, page: Page) -> tuple[list[dict], int]:
    columns = await db.table_columns("listings")
    where = build_by_type_where(columns)

    total = int(await db.fetch_val(f"SELECT COUNT(*) FROM listings WHERE {where}", business_type) or 0)
    rows = await db.fetch_all(
        f"""
        SELECT *
        FROM listings
        WHERE {where}
        ORDER BY name
        LIMIT $2 OFFSET $3
        """,
        business_type,
        page.page_size,
        page.offset,
    )
    return rows, total


async def category_tables_exist() -> bool:
    return await db.table_exists("categories") and await db.table_exists("listing_categories")


async def list_categories_for_listing(listing_id: int) -> list[dict]:
    return await db.fetch_all(CATEGORY_SQL, listing_id)


async def get_listing(listing_id: int) -> dict | None:
    return await db.fetch_one("SELECT * FROM listings WHERE id = $1", listing_id)


async def list_reviews(google_place_id: str) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, author_name, rating, relative_time_description, text, time,
               profile_photo_url, author_url
        FROM listing_reviews
        WHERE listing_google_place_id = $1
        ORDER BY time DESC NULLS LAST, id
        """,
        google_place_id,
    )


async def list_photos(google_place_id: str) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, photo_reference, height, width, html_attributions, photo_url
        FROM listing_photos
        WHERE listing_google_place_id = $1
        ORDER BY id
        """,
        google_place_id,
    )


async def list_opening_periods(google_place_id: str) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, open_day, open_time, close_day, close_time
        FROM listing_opening_hours
        WHERE listing_google_place_id = $1
        ORDER BY open_day, open_time
        """,
        google_place_id,
    )


async def create_listing(fields: dict[str, Any], *, user_id: int | None, is_approved: bool) -> dict:
    data = {k: v for k, v in fields.items() if k in WRITABLE_COLUMNS}
    data["types"] = data.get("types") or []
    data["user_id"] = user_id
    data["is_approved"] = is_approved

    columns = list(data)
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO listings ({", ".join(columns)})
        VALUES ({placeholders})
        RETURNING *
        """,
        *data.values(),
    )
    if row is None:
        raise RuntimeError("Failed to create listing.")
    return row


async def list_by_owner(user_id: int) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT *
        FROM listings
        WHERE user_id = $1
        ORDER BY created_at DESC
        """,
        user_id,
    )


async def update_listing(listing_id: int, fields: dict[str, Any]) -> dict | None:
    """
    COALESCE-style partial update: None leaves the stored value untouched.
    """
    data = {k: fields.get(k) for k in WRITABLE_COLUMNS if k != "google_place_id"}
    assignments = [f"{column} = COALESCE(${index}, {column})" for index, column in enumerate(data, start=2)]
    return await db.fetch_one(
        f"""
        UPDATE listings
        SET {", ".join(assignments)},
            updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        listing_id,
        *data.values(),
    )


async def set_featured(listing_ids: list[int], is_featured: bool) -> list[dict]:
    return await db.fetch_all(
        """
        UPDATE listings
        SET is_featured = $1,
            updated_at = now()
        WHERE id = ANY($2::int[])
        RETURNING id, name, is_featured
        """,
        is_featured,
        listing_ids,
    )


async def approve_listing(listing_id: int) -> dict | None:
    return await db.fetch_one(
        """
        UPDATE listings
        SET is_approved = TRUE,
            updated_at = now()
        WHERE id = $1
        RETURNING id, name, is_approved
        """,
        listing_id,
    )


async def delete_listing(listing_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM listings WHERE id = $1 RETURNING id", listing_id)
    return row is not None


async def save_description(listing_id: int, description: str) -> dict | None:
    return await db.fetch_one(
        """
        UPDATE listings
        SET description = $2,
            updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        listing_id,
        description,
    )


async def save_faqs(listing_id: int, faqs: list[dict]) -> dict | None:
    return await db.fetch_one(
        """
        UPDATE listings
        SET faqs = $2,
            faqs_generated = TRUE,
            updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        listing_id,
        faqs,
    )


async def upsert_place(conn: asyncpg.Connection, place: dict[str, Any]) -> bool:
    """
    Insert or refresh a listing keyed by google_place_id.

    Returns True when a new row was inserted.
    """
    row = await db.fetch_one(
        """
        INSERT INTO listings (
            google_place_id, name, formatted_address, latitude, longitude, phone_number, website,
            rating, user_ratings_total, main_type, types, editorial_summary, place_id
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13)
        ON CONFLICT (google_place_id) DO UPDATE SET
            name = EXCLUDED.name,
            formatted_address = EXCLUDED.formatted_address,
            latitude = EXCLUDED.latitude,
            longitude = EXCLUDED.longitude,
            phone_number = EXCLUDED.phone_number,
            website = EXCLUDED.website,
            rating = EXCLUDED.rating,
            user_ratings_total = EXCLUDED.user_ratings_total,
            main_type = EXCLUDED.main_type,
            types = EXCLUDED.types,
            editorial_summary = EXCLUDED.editorial_summary,
            updated_at = now()
        RETURNING (xmax = 0) AS inserted
        """,
        place["google_place_id"],
        place["name"],
        place["formatted_address"],
        place["latitude"],
        place["longitude"],
        place["phone_number"],
        place["website"],
        place["rating"],
        place["user_ratings_total"],
        place["main_type"],
        place["types"],
        place["editorial_summary"],
        place["place_id"],
        conn=conn,
    )
    return bool(row and row["inserted"])


async def replace_reviews(conn: asyncpg.Connection, google_place_id: str, reviews: list[dict]) -> None:
    await db.execute("DELETE FROM listing_reviews WHERE listing_google_place_id = $1", google_place_id, conn=conn)
    for review in reviews:
        await db.execute(
            """
            INSERT INTO listing_reviews (
                listing_google_place_id, author_name, rating, relative_time_description,
                text, time, profile_photo_url, author_url
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            """,
            google_place_id,
            review.get("author_name"),
            review.get("rating"),
            review.get("relative_time_description"),
            review.get("text"),
            review.get("time"),
            review.get("profile_photo_url"),
            review.get("author_url"),
            conn=conn,
        )


async def replace_photos(conn: asyncpg.Connection, google_place_id: str, photos: list[dict]) -> None:
    await db.execute("DELETE FROM listing_photos WHERE listing_google_place_id = $1", google_place_id, conn=conn)
    for photo in photos:
        await db.execute(
            """
            INSERT INTO listing_photos (listing_google_place_id, photo_reference, height, width, html_attributions)
            VALUES ($1, $2, $3, $4, $5)
            """,
            google_place_id,
            photo.get("photo_reference"),
            photo.get("height"),
            photo.get("width"),
            photo.get("html_attributions") or [],
            conn=conn,
        )


async def replace_opening_periods(conn: asyncpg.Connection, google_place_id: str, periods: list[dict]) -> None:
    await db.execute(
        "DELETE FROM listing_opening_hours WHERE listing_google_place_id = $1",
        google_place_id,
        conn=conn,
    )
    for period in periods:
        await db.execute(
            """
            INSERT INTO listing_opening_hours (listing_google_place_id, open_day, open_time, close_day, close_time)
            VALUES ($1, $2, $3, $4, $5)
            """,
            google_place_id,
            period.get("open_day"),
            period.get("open_time"),
            period.get("close_day"),
            period.get("close_time"),
            conn=conn,
        )
