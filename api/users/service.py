"""
Admin user management business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from auth import repository as auth_repository
from auth import security
from core import settings

from . import repository, schemas

logger = logging.getLogger(__name__)


async def list_users() -> list[dict]:
    return await repository.list_users()


async def get_user(user_id: int) -> dict:
    row = await repository.get_user(user_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return row


async def create_user(payload: schemas.CreateUserRequest) -> dict:
    if await repository.email_taken(payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use.")

    return await auth_repository.create_user(
        name=payload.name,
        email=payload.email,
        password_hash=security.hash_password(payload.password),
        role=payload.role,
    )


async def update_user(user_id: int, payload: schemas.UpdateUserRequest) -> dict:
    current = await get_user(user_id)

    fields: dict[str, object] = {}
    if payload.email is not None:
        email = auth_repository.normalize_email(payload.email)
        if await repository.email_taken(email, exclude_id=user_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use.")
        fields["email"] = email
    if payload.name is not None:
        fields["name"] = payload.name.strip()
    if payload.role is not None:
        if security.is_admin(current) and payload.role != security.ROLE_ADMIN and await repository.count_admins() <= 1:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot demote the last admin user.")
        fields["role"] = payload.role
    if payload.is_active is not None:
        fields["is_active"] = payload.is_active
    if payload.password is not None:
        fields["password_hash"] = security.hash_password(payload.password)

    if not fields:
        return current

    row = await repository.update_user(user_id, fields)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return row


async def delete_user(user_id: int) -> dict:
    current = await get_user(user_id)
    if security.is_admin(current) and await repository.count_admins() <= 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete the last admin user.")

    await repository.delete_user(user_id)
    return {"message": "User deleted successfully"}


async def ensure_default_admin() -> None:
    """
    Create the bootstrap admin account when no admin exists yet.
    """
    if await repository.count_admins() > 0:
        return None

    email = settings.env_str("DEFAULT_ADMIN_EMAIL", "admin@example.com")
    password = settings.env_str("DEFAULT_ADMIN_PASSWORD", "admin12345")
    if await repository.email_taken(email):
        logger.warning("default_admin_skipped email=%s reason=email_in_use", email)
        return None

    await auth_repository.create_user(
        name="Admin User",
        email=email,
        password_hash=security.hash_password(password),
        role=security.ROLE_ADMIN,
    )
    logger.info("default_admin_created email=%s", email)
