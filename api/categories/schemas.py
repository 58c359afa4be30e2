"""
Pydantic schemas for category endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None
    icon: str | None = Field(default=None, max_length=100)
    parent_id: int | None = None
    is_active: bool = True


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None
    icon: str | None = Field(default=None, max_length=100)
    parent_id: int | None = None
    is_active: bool | None = None


class AssociateCategoryRequest(BaseModel):
    listing_id: int
    category_id: int
    is_primary: bool = False
