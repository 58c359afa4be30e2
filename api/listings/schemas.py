"""
Pydantic schemas for listing endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class ListingFields(BaseModel):
    formatted_address: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    phone_number: str | None = Field(default=None, max_length=64)
    website: str | None = None
    main_type: str | None = Field(default=None, max_length=100)
    types: list[str] | None = None
    description: str | None = None
    seo_title: str | None = Field(default=None, max_length=255)
    seo_description: str | None = None
    seo_keywords: str | None = None
    main_image_url: str | None = None


class CreateListingRequest(ListingFields):
    name: str = Field(..., min_length=1, max_length=255)
    google_place_id: str | None = Field(default=None, max_length=255)


class UpdateListingRequest(ListingFields):
    name: str = Field(..., min_length=1, max_length=255)
    formatted_address: str = Field(..., min_length=1)
    is_featured: bool | None = None


class FeaturedUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    listing_ids: list[int] = Field(..., alias="listingIds", min_length=1)
    is_featured: StrictBool = Field(..., alias="isFeatured")
