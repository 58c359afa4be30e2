"""
Third-party API key management.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core import settings

from . import repository, schemas

logger = logging.getLogger(__name__)

# Env var fallback per service when no active key is stored.
ENV_FALLBACKS: dict[str, str] = {"openai": "OPENAI_API_KEY"}


def mask_key(secret: str) -> str:
    """
    Keep the last four characters visible: "sk-abcdef1234" -> "*********1234".
    """
    if len(secret) <= 4:
        return "*" * len(secret)
    return "*" * (len(secret) - 4) + secret[-4:]


async def list_keys() -> list[dict]:
    return await repository.list_keys()


async def get_key(service_name: str) -> dict:
    row = await repository.get_by_service(service_name)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API key not found.")
    row["api_key"] = mask_key(str(row.get("api_key") or ""))
    return row


async def upsert_key(payload: schemas.UpsertApiKeyRequest) -> dict:
    service_name = payload.service_name.strip()
    api_key = payload.api_key.strip()
    if not service_name or not api_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Service name and API key are required.",
        )

    row = await repository.upsert_key(service_name=service_name, api_key=api_key, is_active=payload.is_active)
    created = bool(row.pop("created", False))
    logger.info("api_key_saved service=%s created=%s active=%s", service_name, created, row["is_active"])
    row["message"] = "API key created successfully" if created else "API key updated successfully"
    return row


async def delete_key(key_id: int) -> dict:
    if not await repository.delete_key(key_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API key not found.")
    logger.info("api_key_deleted id=%s", key_id)
    return {"message": "API key deleted successfully"}


async def get_active_key(service_name: str) -> str | None:
    """
    Active stored key for a service, else its environment fallback.
    """
    secret = await repository.get_active_secret(service_name)
    if secret:
        return secret
    env_name = ENV_FALLBACKS.get(service_name)
    if env_name is None:
        return None
    return settings.env_str(env_name) or None
