"""
Category endpoints and listing/category association endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from core.pagination import make_page

from . import schemas, service

router = APIRouter()


@router.get("/api/categories")
async def list_categories() -> list[dict]:
    return await service.list_categories()


@router.get("/api/categories/with-counts")
async def list_categories_with_counts() -> list[dict]:
    return await service.list_categories_with_counts()


@router.get("/api/categories/slug/{slug}")
async def get_category_by_slug(slug: str) -> dict:
    return await service.get_category_by_slug(slug)


@router.get("/api/categories/slug/{slug}/listings")
async def category_listings(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> dict:
    return await service.category_listings(slug, make_page(page, limit))


@router.get("/api/categories/{category_id}")
async def get_category(category_id: int) -> dict:
    return await service.get_category(category_id)


@router.post("/api/categories", status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: schemas.CreateCategoryRequest,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.create_category(payload)


@router.put("/api/categories/{category_id}")
async def update_category(
    category_id: int,
    payload: schemas.UpdateCategoryRequest,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.update_category(category_id, payload)


@router.delete("/api/categories/{category_id}")
async def delete_category(
    category_id: int,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_category(category_id)


@router.get("/api/listings/{listing_id}/categories")
async def listing_categories(listing_id: int) -> list[dict]:
    return await service.listing_categories(listing_id)


@router.post("/api/listing-categories", status_code=status.HTTP_201_CREATED)
async def associate_category(
    payload: schemas.AssociateCategoryRequest,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.associate(payload)


@router.delete("/api/listings/{listing_id}/categories/{category_id}")
async def dissociate_category(
    listing_id: int,
    category_id: int,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.dissociate(listing_id, category_id)
