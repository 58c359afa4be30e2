"""
Auth API schemas. `Role` and the email/password field limits are shared
with admin user management.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "admin"]

EMAIL_FIELD = {"min_length": 3, "max_length": 320}
PASSWORD_FIELD = {"min_length": 8, "max_length": 128}


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., **EMAIL_FIELD)
    password: str = Field(..., **PASSWORD_FIELD)


class LoginRequest(BaseModel):
    email: str = Field(..., **EMAIL_FIELD)
    password: str = Field(..., min_length=1, max_length=128)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=20)


class LogoutRequest(BaseModel):
    # Omitted: revoke every refresh token of the caller.
    refresh_token: str | None = Field(default=None, min_length=20)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    is_active: bool
    created_at: datetime


class TokenPairResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponse(BaseModel):
    user: UserResponse
    tokens: TokenPairResponse
