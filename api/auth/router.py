"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request, status

from . import dependencies, schemas, service

router = APIRouter(prefix="/auth")


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    request: Request,
    user_agent: str | None = Header(default=None),
) -> schemas.AuthResponse:
    return await service.register(payload, user_agent=user_agent, ip_address=_client_ip(request))


@router.post("/login")
async def login(
    payload: schemas.LoginRequest,
    request: Request,
    user_agent: str | None = Header(default=None),
) -> schemas.AuthResponse:
    return await service.login(payload, user_agent=user_agent, ip_address=_client_ip(request))


@router.post("/refresh")
async def refresh(
    payload: schemas.RefreshRequest,
    request: Request,
    user_agent: str | None = Header(default=None),
) -> schemas.TokenPairResponse:
    return await service.refresh_tokens(payload, user_agent=user_agent, ip_address=_client_ip(request))


@router.post("/logout")
async def logout(
    payload: schemas.LogoutRequest,
    current_user: dict = Depends(dependencies.get_current_user),
) -> dict:
    return await service.logout(payload, current_user_id=int(current_user["id"]))


@router.get("/me")
async def me(access_token: str = Depends(dependencies.get_bearer_token)) -> schemas.UserResponse:
    return await service.me(access_token)
