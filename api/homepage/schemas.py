"""
Pydantic schemas for homepage content endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HomepageItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    section_id: str = Field(..., alias="sectionId", min_length=1, max_length=50)
    content_key: str = Field(..., alias="contentKey", min_length=1, max_length=50)
    content: str


class HomepageUpdateRequest(BaseModel):
    """
    Either a batch (`updates`) or a single item (`sectionId`/`contentKey`/`content`).
    """

    model_config = ConfigDict(populate_by_name=True)

    updates: list[HomepageItem] | None = None
    section_id: str | None = Field(default=None, alias="sectionId", max_length=50)
    content_key: str | None = Field(default=None, alias="contentKey", max_length=50)
    content: str | None = None
