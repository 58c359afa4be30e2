"""
Pydantic schemas for AI prompt endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CreatePromptRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=50)
    content: str = Field(..., min_length=1)


class UpdatePromptRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: str | None = Field(default=None, min_length=1, max_length=50)
    content: str | None = Field(default=None, min_length=1)
