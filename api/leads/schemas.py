"""
Pydantic schemas for lead endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LeadStatus = Literal["new", "read", "replied", "archived"]
LEAD_STATUSES: tuple[str, ...] = ("new", "read", "replied", "archived")


class CreateLeadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    listing_id: int = Field(..., alias="listingId")
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    message: str = Field(..., min_length=1)


class UpdateLeadStatusRequest(BaseModel):
    status: LeadStatus


class BulkLeadStatusRequest(BaseModel):
    ids: list[int]
    status: LeadStatus
