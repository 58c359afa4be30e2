"""
Lead endpoints. Submitting a lead is public; everything else is admin-only.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from core.pagination import make_page

from . import schemas, service

router = APIRouter(prefix="/api/leads")

admin = [Depends(auth_dependencies.require_admin)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_lead(payload: schemas.CreateLeadRequest) -> dict:
    return await service.create_lead(payload)


@router.get("", dependencies=admin)
async def list_leads(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    lead_status: str | None = Query(default=None, alias="status"),
    listing_id: int | None = Query(default=None, alias="listingId"),
    search: str = Query(default="", max_length=200),
) -> dict:
    return await service.list_leads(
        make_page(page, limit),
        lead_status=lead_status,
        listing_id=listing_id,
        search=search,
    )


@router.get("/stats", dependencies=admin)
async def lead_stats() -> dict:
    return await service.lead_stats()


@router.put("/bulk-status", dependencies=admin)
async def bulk_update_status(payload: schemas.BulkLeadStatusRequest) -> dict:
    return await service.bulk_update_status(payload)


@router.get("/{lead_id}", dependencies=admin)
async def get_lead(lead_id: int) -> dict:
    return await service.get_lead(lead_id)


@router.put("/{lead_id}/status", dependencies=admin)
async def update_status(lead_id: int, payload: schemas.UpdateLeadStatusRequest) -> dict:
    return await service.update_status(lead_id, payload)


@router.delete("/{lead_id}", dependencies=admin)
async def delete_lead(lead_id: int) -> dict:
    return await service.delete_lead(lead_id)
