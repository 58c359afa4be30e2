"""
Idempotent schema bootstrap.

Statements run in order at startup (when DB_AUTO_MIGRATE is on). Every
statement is safe to re-run against an existing database.
"""

from __future__ import annotations

import logging

from . import db

logger = logging.getLogger(__name__)

STATEMENTS: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL DEFAULT '',
        email VARCHAR(320) NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        role VARCHAR(20) NOT NULL DEFAULT 'user',
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS refresh_tokens (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        token_hash VARCHAR(64) NOT NULL UNIQUE,
        expires_at TIMESTAMPTZ NOT NULL,
        revoked_at TIMESTAMPTZ,
        replaced_by_token_id INTEGER REFERENCES refresh_tokens(id) ON DELETE SET NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        last_used_at TIMESTAMPTZ,
        user_agent TEXT,
        ip_address TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS listings (
        id SERIAL PRIMARY KEY,
        google_place_id VARCHAR(255) UNIQUE,
        place_id VARCHAR(255),
        name VARCHAR(255) NOT NULL,
        formatted_address TEXT,
        vicinity TEXT,
        latitude DOUBLE PRECISION,
        longitude DOUBLE PRECISION,
        phone_number VARCHAR(64),
        website TEXT,
        rating NUMERIC(2, 1),
        user_ratings_total INTEGER,
        main_type VARCHAR(100),
        types TEXT[] NOT NULL DEFAULT '{}',
        editorial_summary TEXT,
        description TEXT,
        faqs JSONB,
        faqs_generated BOOLEAN NOT NULL DEFAULT FALSE,
        seo_title VARCHAR(255),
        seo_description TEXT,
        seo_keywords TEXT,
        main_image_url TEXT,
        user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
        is_approved BOOLEAN NOT NULL DEFAULT TRUE,
        is_featured BOOLEAN NOT NULL DEFAULT FALSE,
        has_unread_leads BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS listing_reviews (
        id SERIAL PRIMARY KEY,
        listing_google_place_id VARCHAR(255) NOT NULL,
        author_name VARCHAR(255),
        rating INTEGER,
        relative_time_description VARCHAR(100),
        text TEXT,
        time BIGINT,
        profile_photo_url TEXT,
        author_url TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS listing_photos (
        id SERIAL PRIMARY KEY,
        listing_google_place_id VARCHAR(255) NOT NULL,
        photo_reference TEXT,
        height INTEGER,
        width INTEGER,
        html_attributions JSONB,
        photo_url TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS listing_opening_hours (
        id SERIAL PRIMARY KEY,
        listing_google_place_id VARCHAR(255) NOT NULL,
        open_day INTEGER,
        open_time VARCHAR(4),
        close_day INTEGER,
        close_time VARCHAR(4)
    )
    """,
    "CREATE INDEX IF NOT EXISTS listing_reviews_place_idx ON listing_reviews (listing_google_place_id)",
    "CREATE INDEX IF NOT EXISTS listing_photos_place_idx ON listing_photos (listing_google_place_id)",
    "CREATE INDEX IF NOT EXISTS listing_hours_place_idx ON listing_opening_hours (listing_google_place_id)",
    """
    CREATE TABLE IF NOT EXISTS categories (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        slug VARCHAR(255) NOT NULL UNIQUE,
        description TEXT,
        icon VARCHAR(100),
        parent_id INTEGER REFERENCES categories(id) ON DELETE RESTRICT,
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS listing_categories (
        listing_id INTEGER NOT NULL REFERENCES listings(id) ON DELETE CASCADE,
        category_id INTEGER NOT NULL REFERENCES categories(id) ON DELETE RESTRICT,
        is_primary BOOLEAN NOT NULL DEFAULT FALSE,
        PRIMARY KEY (listing_id, category_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS leads (
        id SERIAL PRIMARY KEY,
        listing_id INTEGER NOT NULL REFERENCES listings(id) ON DELETE CASCADE,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(320) NOT NULL,
        message TEXT NOT NULL,
        status VARCHAR(20) NOT NULL DEFAULT 'new',
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    "CREATE INDEX IF NOT EXISTS leads_listing_status_idx ON leads (listing_id, status)",
    """
    CREATE TABLE IF NOT EXISTS blog_posts (
        id SERIAL PRIMARY KEY,
        title VARCHAR(255) NOT NULL,
        slug VARCHAR(255) NOT NULL UNIQUE,
        content TEXT NOT NULL,
        excerpt TEXT,
        featured_image_url TEXT,
        author VARCHAR(100),
        meta_title VARCHAR(255),
        meta_description TEXT,
        status VARCHAR(50) NOT NULL DEFAULT 'draft',
        published_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS content_pages (
        id SERIAL PRIMARY KEY,
        title VARCHAR(255) NOT NULL,
        slug VARCHAR(255) NOT NULL UNIQUE,
        content TEXT NOT NULL,
        featured_photo_url TEXT,
        meta_title VARCHAR(255),
        meta_description TEXT,
        status VARCHAR(50) NOT NULL DEFAULT 'draft',
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS menu_items (
        id SERIAL PRIMARY KEY,
        label VARCHAR(255) NOT NULL,
        url TEXT NOT NULL,
        position INTEGER NOT NULL DEFAULT 0,
        parent_id INTEGER REFERENCES menu_items(id) ON DELETE SET NULL,
        target VARCHAR(20) NOT NULL DEFAULT '_self',
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS homepage_content (
        id SERIAL PRIMARY KEY,
        section_id VARCHAR(50) NOT NULL,
        content_key VARCHAR(50) NOT NULL,
        content TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        UNIQUE (section_id, content_key)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS prompts (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        type VARCHAR(50) NOT NULL,
        content TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_keys (
        id SERIAL PRIMARY KEY,
        service_name VARCHAR(100) NOT NULL UNIQUE,
        api_key TEXT NOT NULL,
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS site_settings (
        group_name VARCHAR(50) PRIMARY KEY,
        value JSONB NOT NULL DEFAULT '{}'::jsonb,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
]


async def apply() -> None:
    async with db.transaction() as conn:
        for statement in STATEMENTS:
            await db.execute(statement, conn=conn)
    logger.info("schema_applied statements=%s", len(STATEMENTS))
