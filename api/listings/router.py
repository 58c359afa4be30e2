"""
Listing API endpoints.

Static paths (`/public`, `/featured`, `/by-type/...`) are declared before
`/{listing_id}` so they are never captured by the id route.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, File, Query, UploadFile, status

from auth import dependencies as auth_dependencies
from core.pagination import make_page

from . import schemas, service

router = APIRouter()


@router.get("/api/listings")
async def list_listings(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, alias="pageSize", ge=1, le=100),
    search: str = Query(default="", max_length=200),
) -> dict:
    return await service.admin_listings(make_page(page, page_size), search=search)


@router.get("/api/listings/public")
async def list_public_listings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> dict:
    return await service.public_listings(make_page(page, limit))


@router.get("/api/listings/featured")
async def list_featured_listings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> dict:
    return await service.public_listings(make_page(page, limit), featured_only=True)


@router.put("/api/listings/featured")
async def update_featured(
    payload: schemas.FeaturedUpdateRequest,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.update_featured(payload)


@router.get("/api/listings/by-type/{business_type}")
async def list_by_type(
    business_type: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> dict:
    return await service.listings_by_type(business_type, make_page(page, limit))


@router.post("/api/listings", status_code=status.HTTP_201_CREATED)
async def create_listing(
    payload: schemas.CreateListingRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.create_listing(payload, current_user=current_user)


@router.get("/api/my-listings")
async def my_listings(
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> list[dict]:
    return await service.my_listings(current_user)


@router.get("/api/listings/{listing_id}")
async def get_listing(listing_id: int) -> dict:
    return await service.listing_detail(listing_id)


@router.put("/api/listings/{listing_id}")
async def update_listing(
    listing_id: int,
    payload: schemas.UpdateListingRequest,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.update_listing(listing_id, payload)


@router.put("/api/listings/{listing_id}/approve")
async def approve_listing(
    listing_id: int,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.approve_listing(listing_id)


@router.delete("/api/listings/{listing_id}")
async def delete_listing(
    listing_id: int,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_listing(listing_id)


@router.post("/api/import_listings")
async def import_listings(
    payload: Any = Body(default=None),
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    """
    Upsert a batch of Google Places results (JSON array body).
    """
    return await service.import_listings(payload)


@router.post("/api/import_listings/upload")
async def import_listings_upload(
    file: UploadFile = File(...),
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    """
    Same as `/api/import_listings`, reading the batch from an uploaded .json file.
    """
    return await service.import_listings_upload(file)
