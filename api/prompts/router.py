"""
AI prompt endpoints. Reads are public; writes are admin-only.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/prompts")

admin = [Depends(auth_dependencies.require_admin)]


@router.get("")
async def list_prompts() -> list[dict]:
    return await service.list_prompts()


@router.get("/{prompt_id}")
async def get_prompt(prompt_id: int) -> dict:
    return await service.get_prompt(prompt_id)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=admin)
async def create_prompt(payload: schemas.CreatePromptRequest) -> dict:
    return await service.create_prompt(payload)


@router.put("/{prompt_id}", dependencies=admin)
async def update_prompt(prompt_id: int, payload: schemas.UpdatePromptRequest) -> dict:
    return await service.update_prompt(prompt_id, payload)


@router.delete("/{prompt_id}", dependencies=admin)
async def delete_prompt(prompt_id: int) -> dict:
    return await service.delete_prompt(prompt_id)
