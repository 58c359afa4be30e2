"""
Pydantic schemas for navigation menu endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

LinkTarget = Literal["_self", "_blank"]


class CreateMenuItemRequest(BaseModel):
    label: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1)
    position: int = 0
    parent_id: int | None = None
    target: LinkTarget = "_self"
    is_active: bool = True


class UpdateMenuItemRequest(BaseModel):
    label: str | None = Field(default=None, min_length=1, max_length=255)
    url: str | None = Field(default=None, min_length=1)
    position: int | None = None
    parent_id: int | None = None
    target: LinkTarget | None = None
    is_active: bool | None = None


class MenuPosition(BaseModel):
    id: int
    position: int
