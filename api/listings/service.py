"""
Listing business logic.

Scope:
- public/admin/featured/by-type listing pages
- listing detail with reviews, photos, hours and categories
- create/update/approve/delete and bulk featured toggling
- Places import (see `importer.py`)
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, UploadFile, status

from auth import security
from core.pagination import Page, page_info

from . import importer, repository, schemas

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found.")


def attach_categories(listing: dict, categories: list[dict]) -> dict:
    listing["categories"] = categories
    primary = next((c for c in categories if c.get("is_primary")), None)
    if primary is not None:
        listing["primary_category"] = primary
    return listing


async def admin_listings(page: Page, *, search: str = "") -> dict:
    rows, total = await repository.list_admin(page, search=search)
    logger.debug("admin_listings page=%s size=%s total=%s", page.page, page.page_size, total)
    return {"data": rows, "pagination": page_info(page, total)}


async def public_listings(page: Page, *, featured_only: bool = False) -> dict:
    rows, total = await repository.list_approved(page, featured_only=featured_only)
    return {"listings": rows, "pagination": page_info(page, total)}


async def listings_by_type(raw_type: str, page: Page) -> dict:
    business_type = (raw_type or "").strip().replace("-", "_")
    if not business_type:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Business type is required.")

    rows, total = await repository.list_by_type(business_type, page)
    if rows and await repository.category_tables_exist():
        for listing in rows:
            attach_categories(listing, await repository.list_categories_for_listing(int(listing["id"])))

    return {
        "business_type": business_type,
        "listings": rows,
        "pagination": page_info(page, total),
    }


async def listing_detail(listing_id: int) -> dict:
    listing = await repository.get_listing(listing_id)
    if listing is None:
        raise _not_found()

    place_id = listing.get("google_place_id")
    if place_id:
        listing["reviews"] = await repository.list_reviews(place_id)
        listing["photos"] = await repository.list_photos(place_id)
        listing["opening_hours"] = {"periods": await repository.list_opening_periods(place_id)}
    else:
        listing["reviews"] = []
        listing["photos"] = []
        listing["opening_hours"] = {"periods": []}

    return attach_categories(listing, await repository.list_categories_for_listing(listing_id))


async def create_listing(payload: schemas.CreateListingRequest, *, current_user: dict) -> dict:
    is_admin = security.is_admin(current_user)
    row = await repository.create_listing(
        payload.model_dump(),
        # Admin-created listings are directory-owned and live immediately.
        user_id=None if is_admin else int(current_user["id"]),
        is_approved=is_admin,
    )
    logger.info("listing_created id=%s approved=%s", row["id"], row["is_approved"])
    message = "Listing created successfully" if is_admin else "Listing created successfully and awaiting approval"
    return {"message": message, "listing": row}


async def my_listings(current_user: dict) -> list[dict]:
    return await repository.list_by_owner(int(current_user["id"]))


async def update_listing(listing_id: int, payload: schemas.UpdateListingRequest) -> dict:
    row = await repository.update_listing(listing_id, payload.model_dump())
    if row is None:
        raise _not_found()
    return row


async def update_featured(payload: schemas.FeaturedUpdateRequest) -> dict:
    rows = await repository.set_featured(payload.listing_ids, payload.is_featured)
    if not rows:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No listings found with the provided IDs.",
        )
    return {
        "success": True,
        "message": f"Featured status updated for {len(rows)} listings",
        "listings": rows,
    }


async def approve_listing(listing_id: int) -> dict:
    row = await repository.approve_listing(listing_id)
    if row is None:
        raise _not_found()
    return {"message": "Listing approved successfully", "listing": row}


async def delete_listing(listing_id: int) -> dict:
    if not await repository.delete_listing(listing_id):
        raise _not_found()
    logger.info("listing_deleted id=%s", listing_id)
    return {"message": "Listing deleted successfully"}


async def import_listings(payload: object) -> dict:
    try:
        items = importer.validate_batch(payload)
    except importer.ImportPayloadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    stats = await importer.import_places(items)
    return stats.as_response()


async def import_listings_upload(file: UploadFile) -> dict:
    if not (file.filename or "").lower().endswith(".json"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Upload a .json file.")

    data = await file.read(importer.MAX_UPLOAD_BYTES + 1)
    try:
        items = importer.decode_upload(data)
    except importer.ImportPayloadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    stats = await importer.import_places(items)
    return stats.as_response()
