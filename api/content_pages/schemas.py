"""
Pydantic schemas for content page endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

PageStatus = Literal["draft", "published", "archived"]


class ContentPageRequest(BaseModel):
    title: str = Field(default="", max_length=255)
    slug: str = Field(default="", max_length=255)
    content: str = ""
    featured_photo_url: str | None = None
    meta_title: str | None = Field(default=None, max_length=255)
    meta_description: str | None = None
    status: PageStatus = "draft"
