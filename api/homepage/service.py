"""
Homepage content business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)

DEFAULT_CONTENT: list[tuple[str, str, str]] = [
    ("header", "title", "Find Your Perfect Local Business"),
    ("header", "subtitle", "Discover and connect with the best local businesses in your area"),
    ("header", "buttonText", "Explore Now"),
    ("featureListings", "title", "Featured Listings"),
    ("featureListings", "subtitle", "Explore our top-rated local businesses"),
    ("directory", "title", "Browse Our Directory"),
    ("directory", "subtitle", "Find businesses by category"),
    ("blog", "title", "Latest Updates"),
    ("blog", "subtitle", "From our blog"),
    ("blog", "description", "Stay updated with the latest news and tips from local businesses"),
    ("blog", "buttonText", "View All Articles"),
    ("getStarted", "title", "Try Our Platform"),
    ("getStarted", "description", "Join thousands of happy users discovering local businesses with our platform"),
    ("getStarted", "primaryButtonText", "Get Started"),
    ("getStarted", "secondaryButtonText", "Learn More"),
    ("footer", "copyright", "© 2025 Local Business Directory. All rights reserved."),
]


def group_content(rows: list[dict]) -> dict[str, dict[str, str]]:
    grouped: dict[str, dict[str, str]] = {}
    for row in rows:
        grouped.setdefault(row["section_id"], {})[row["content_key"]] = row["content"]
    return grouped


async def get_content(*, grouped: bool = False) -> list[dict] | dict[str, dict[str, str]]:
    rows = await repository.list_content()
    return group_content(rows) if grouped else rows


async def update_content(payload: schemas.HomepageUpdateRequest) -> dict:
    if payload.updates is not None:
        if not payload.updates:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Updates array must not be empty.")
        rows = await repository.upsert_many(
            [(item.section_id, item.content_key, item.content) for item in payload.updates]
        )
        logger.info("homepage_updated items=%s", len(rows))
        return {"success": True, "message": "Homepage content updated successfully", "updated": len(rows)}

    if not payload.section_id or not payload.content_key or payload.content is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="sectionId, contentKey, and content are required.",
        )

    row = await repository.upsert(payload.section_id, payload.content_key, payload.content)
    logger.info("homepage_updated section=%s key=%s", payload.section_id, payload.content_key)
    return {"success": True, "message": "Homepage content updated successfully", "content": row}


async def ensure_defaults() -> None:
    """
    Seed the default homepage copy when the table is empty.
    """
    if await repository.count_content() > 0:
        return None
    await repository.upsert_many(DEFAULT_CONTENT)
    logger.info("homepage_defaults_seeded items=%s", len(DEFAULT_CONTENT))
