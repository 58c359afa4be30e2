"""
Pydantic schemas for blog post endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

PostStatus = Literal["draft", "published", "archived"]


class BlogPostRequest(BaseModel):
    """
    Body for both create and update (updates replace every field).
    """

    title: str = Field(default="", max_length=255)
    slug: str = Field(default="", max_length=255)
    content: str = ""
    excerpt: str | None = None
    featured_image_url: str | None = None
    author: str | None = Field(default=None, max_length=100)
    meta_title: str | None = Field(default=None, max_length=255)
    meta_description: str | None = None
    status: PostStatus = "draft"
