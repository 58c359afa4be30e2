"""
AI prompt business logic.

Prompts are editable templates used by listing generation. The newest
prompt of a given type wins.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import defaults, repository, schemas

logger = logging.getLogger(__name__)

PLACEHOLDERS: tuple[str, ...] = ("name", "business_type", "location", "rating_info", "description")


def render(template: str, values: dict[str, object]) -> str:
    """
    Substitute `{placeholder}` tokens. Unknown braces are left untouched,
    so templates may contain literal JSON.
    """
    text = template
    for key in PLACEHOLDERS:
        text = text.replace("{" + key + "}", str(values.get(key) if values.get(key) is not None else ""))
    return text


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prompt not found.")


async def list_prompts() -> list[dict]:
    return await repository.list_prompts()


async def get_prompt(prompt_id: int) -> dict:
    row = await repository.get_prompt(prompt_id)
    if row is None:
        raise _not_found()
    return row


async def get_prompt_by_type(prompt_type: str) -> dict | None:
    return await repository.get_latest_by_type(prompt_type)


async def template_for(prompt_type: str) -> str:
    row = await get_prompt_by_type(prompt_type)
    if row is not None and str(row.get("content") or "").strip():
        return str(row["content"])
    return defaults.TEMPLATES_BY_TYPE[prompt_type]


async def create_prompt(payload: schemas.CreatePromptRequest) -> dict:
    row = await repository.create_prompt(name=payload.name, prompt_type=payload.type, content=payload.content)
    logger.info("prompt_created id=%s type=%s", row["id"], row["type"])
    return row


async def update_prompt(prompt_id: int, payload: schemas.UpdatePromptRequest) -> dict:
    fields = payload.model_dump(exclude_none=True)
    if not fields:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one field (name, type, or content) must be provided.",
        )
    row = await repository.update_prompt(prompt_id, fields)
    if row is None:
        raise _not_found()
    return row


async def delete_prompt(prompt_id: int) -> dict:
    if not await repository.delete_prompt(prompt_id):
        raise _not_found()
    logger.info("prompt_deleted id=%s", prompt_id)
    return {"message": "Prompt deleted successfully"}


async def ensure_defaults() -> None:
    if await repository.count_prompts() > 0:
        return None
    for prompt in defaults.DEFAULT_PROMPTS:
        await repository.create_prompt(name=prompt["name"], prompt_type=prompt["type"], content=prompt["content"])
    logger.info("prompt_defaults_seeded count=%s", len(defaults.DEFAULT_PROMPTS))
