"""
Site-wide settings: general, seo, scripts and appearance groups.

Reads always return every group with every known key; stored values
override the defaults below.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "general": {
        "siteTitle": "Local Business Directory",
        "siteDescription": "",
        "logoUrl": "",
        "homepageListingCount": 6,
    },
    "seo": {"globalSeoTitle": "", "globalSeoDescription": ""},
    "scripts": {"headerScripts": ""},
    "appearance": {"primaryFontColor": ""},
}


def merge_settings(rows: list[dict]) -> dict[str, dict[str, Any]]:
    merged = {group: dict(values) for group, values in DEFAULT_SETTINGS.items()}
    for row in rows:
        group = row["group_name"]
        if group in merged and isinstance(row.get("value"), dict):
            merged[group].update(row["value"])
    return merged


def changed_groups(payload: schemas.SiteSettingsPatch) -> dict[str, dict[str, Any]]:
    """
    camelCase changes per group, with nulls dropped (null means "leave as is").
    """
    data = payload.model_dump(by_alias=True, exclude_unset=True)
    groups: dict[str, dict[str, Any]] = {}
    for group, values in data.items():
        values = {key: value for key, value in (values or {}).items() if value is not None}
        if values:
            groups[group] = values
    return groups


async def get_settings() -> dict[str, dict[str, Any]]:
    return merge_settings(await repository.list_groups())


async def update_settings(payload: schemas.SiteSettingsPatch) -> dict[str, dict[str, Any]]:
    groups = changed_groups(payload)
    if not groups:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No settings provided.")

    await repository.merge_groups(groups)
    logger.info("site_settings_updated groups=%s", ",".join(sorted(groups)))
    return await get_settings()


async def ensure_defaults() -> None:
    inserted = await repository.insert_missing(DEFAULT_SETTINGS)
    if inserted:
        logger.info("site_settings_seeded groups=%s", inserted)
