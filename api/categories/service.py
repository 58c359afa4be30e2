"""
Category business logic.

Slugs are unique across categories. A category cannot be deleted while it
still has subcategories or is linked to listings.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.pagination import Page, page_info
from core.slugs import slugify
from listings import repository as listings_repository

from . import repository, schemas

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found.")


def _duplicate_slug() -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category slug already exists.")


async def list_categories() -> list[dict]:
    return await repository.list_categories()


async def list_categories_with_counts() -> list[dict]:
    rows = await repository.list_categories_with_counts()
    for row in rows:
        row["listing_count"] = int(row.get("listing_count") or 0)
    return rows


async def get_category(category_id: int) -> dict:
    row = await repository.get_category(category_id)
    if row is None:
        raise _not_found()
    return row


async def get_category_by_slug(slug: str) -> dict:
    row = await repository.get_category_by_slug(slug)
    if row is None:
        raise _not_found()
    return row


async def category_listings(slug: str, page: Page) -> dict:
    category = await get_category_by_slug(slug)
    rows, total = await repository.list_listings_in_category(int(category["id"]), page)
    return {"category": category, "listings": rows, "pagination": page_info(page, total)}


async def check_parent(parent_id: int | None, *, category_id: int | None = None) -> None:
    """
    The parent must exist and, for an existing category, must not be the
    category itself or one of its descendants.
    """
    if parent_id is None:
        return None
    if parent_id == category_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A category cannot be its own parent.")
    if await repository.get_category(parent_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Parent category does not exist.")
    if category_id is not None and await repository.in_subtree(category_id, parent_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A category cannot be nested under one of its own subcategories.",
        )
    return None


async def create_category(payload: schemas.CreateCategoryRequest) -> dict:
    slug = slugify(payload.slug or payload.name)
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category slug cannot be empty.")
    if await repository.slug_taken(slug):
        raise _duplicate_slug()
    await check_parent(payload.parent_id)

    row = await repository.create_category(
        name=payload.name.strip(),
        slug=slug,
        description=payload.description,
        icon=payload.icon,
        parent_id=payload.parent_id,
        is_active=payload.is_active,
    )
    logger.info("category_created id=%s slug=%s", row["id"], slug)
    return row


async def update_category(category_id: int, payload: schemas.UpdateCategoryRequest) -> dict:
    current = await get_category(category_id)

    fields = payload.model_dump(exclude_unset=True)
    fields.pop("slug", None)
    # name/is_active are NOT NULL columns; null means "leave as is".
    for key in ("name", "is_active"):
        if key in fields and fields[key] is None:
            del fields[key]
    if "name" in fields:
        fields["name"] = fields["name"].strip()

    slug: str | None = None
    if payload.slug:
        slug = slugify(payload.slug)
    elif payload.name and payload.name.strip() != current.get("name"):
        slug = slugify(payload.name)

    if slug is not None and slug != current.get("slug"):
        if not slug:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category slug cannot be empty.")
        if await repository.slug_taken(slug, exclude_id=category_id):
            raise _duplicate_slug()
        fields["slug"] = slug

    await check_parent(fields.get("parent_id"), category_id=category_id)

    if not fields:
        return current

    row = await repository.update_category(category_id, fields)
    if row is None:
        raise _not_found()
    return row


async def delete_category(category_id: int) -> dict:
    await get_category(category_id)
    if await repository.has_children(category_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete a category that has subcategories.",
        )
    if await repository.is_in_use(category_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete a category that is assigned to listings.",
        )

    await repository.delete_category(category_id)
    logger.info("category_deleted id=%s", category_id)
    return {"message": "Category deleted successfully"}


async def listing_categories(listing_id: int) -> list[dict]:
    if not await repository.listing_exists(listing_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found.")
    return await listings_repository.list_categories_for_listing(listing_id)


async def associate(payload: schemas.AssociateCategoryRequest) -> dict:
    if not await repository.listing_exists(payload.listing_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found.")
    await get_category(payload.category_id)

    await repository.associate(payload.listing_id, payload.category_id, is_primary=payload.is_primary)
    return {"message": "Category associated with listing successfully"}


async def dissociate(listing_id: int, category_id: int) -> dict:
    if not await repository.dissociate(listing_id, category_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category is not associated with this listing.",
        )
    return {"message": "Category removed from listing successfully"}
