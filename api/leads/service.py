"""
Lead (contact-form submission) business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.pagination import Page, page_info

from . import repository, schemas

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lead not found.")


async def create_lead(payload: schemas.CreateLeadRequest) -> dict:
    name = payload.name.strip()
    email = payload.email.strip()
    message = payload.message.strip()
    if not (name and email and message):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Listing ID, name, email, and message are required.",
        )

    row = await repository.create_lead(listing_id=payload.listing_id, name=name, email=email, message=message)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found.")

    logger.info("lead_created id=%s listing_id=%s", row["id"], payload.listing_id)
    return {"success": True, "message": "Lead created successfully", "lead": row}


async def list_leads(
    page: Page,
    *,
    lead_status: str | None = None,
    listing_id: int | None = None,
    search: str = "",
) -> dict:
    if lead_status and lead_status not in schemas.LEAD_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status value.")

    rows, total = await repository.list_leads(
        page,
        status=lead_status or None,
        listing_id=listing_id,
        search=search.strip(),
    )
    return {"success": True, "leads": rows, "pagination": page_info(page, total)}


async def lead_stats() -> dict:
    return {"success": True, "stats": await repository.lead_stats()}


async def get_lead(lead_id: int) -> dict:
    row = await repository.get_lead(lead_id)
    if row is None:
        raise _not_found()
    return {"success": True, "lead": row}


async def update_status(lead_id: int, payload: schemas.UpdateLeadStatusRequest) -> dict:
    row = await repository.update_status(lead_id, payload.status)
    if row is None:
        raise _not_found()
    logger.info("lead_status_updated id=%s status=%s", lead_id, payload.status)
    return {"success": True, "message": "Lead status updated successfully", "lead": row}


async def bulk_update_status(payload: schemas.BulkLeadStatusRequest) -> dict:
    if not payload.ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Lead IDs array is required.")

    rows = await repository.bulk_update_status(payload.ids, payload.status)
    if not rows:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No leads found with the provided IDs.")

    logger.info("lead_status_bulk_updated count=%s status=%s", len(rows), payload.status)
    return {
        "success": True,
        "message": f"Updated {len(rows)} leads to status '{payload.status}'",
        "updatedCount": len(rows),
    }


async def delete_lead(lead_id: int) -> dict:
    if not await repository.delete_lead(lead_id):
        raise _not_found()
    logger.info("lead_deleted id=%s", lead_id)
    return {"success": True, "message": "Lead deleted successfully"}
