"""
Pydantic schemas for admin user management.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from auth.schemas import EMAIL_FIELD, PASSWORD_FIELD, Role


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., **EMAIL_FIELD)
    password: str = Field(..., **PASSWORD_FIELD)
    role: Role = "user"


class UpdateUserRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, **EMAIL_FIELD)
    password: str | None = Field(default=None, **PASSWORD_FIELD)
    role: Role | None = None
    is_active: bool | None = None
