"""
Pydantic schemas for third-party API key endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UpsertApiKeyRequest(BaseModel):
    service_name: str = Field(..., min_length=1, max_length=100)
    api_key: str = Field(..., min_length=1)
    is_active: bool = True
