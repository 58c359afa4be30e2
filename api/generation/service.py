"""
Listing content generation.

Flow:
1) Load the listing
2) Pick the newest prompt template of the wanted type (built-in default otherwise)
3) Fill placeholders from the listing
4) Ask the OpenAI chat API
5) Store the result on the listing
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from fastapi import HTTPException, status

from api_keys import service as api_keys_service
from core import openai, settings
from listings import repository as listings_repository
from prompts import service as prompts_service

from . import prompts

logger = logging.getLogger(__name__)

OPENAI_SERVICE = "openai"
MISSING_ANSWER = "Information not available."

_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)
_QUESTION_RE = re.compile(r'"question"\s*:\s*"((?:[^"\\]|\\.)*)"', re.DOTALL)
_ANSWER_RE = re.compile(r'"answer"\s*:\s*"((?:[^"\\]|\\.)*)"', re.DOTALL)


def generation_temperature() -> float:
    return settings.env_float("GENERATION_TEMPERATURE", 0.7)


def description_max_output_tokens() -> int:
    return settings.env_int("GENERATION_DESCRIPTION_MAX_TOKENS", 500)


def faq_max_output_tokens() -> int:
    return settings.env_int("GENERATION_FAQ_MAX_TOKENS", 800)


def _unescape(value: str) -> str:
    try:
        return json.loads(f'"{value}"')
    except json.JSONDecodeError:
        return value


def _clean_faqs(items: Any) -> list[dict[str, str]]:
    if not isinstance(items, list):
        return []
    faqs: list[dict[str, str]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        question = str(item.get("question") or "").strip()
        if not question:
            continue
        answer = str(item.get("answer") or "").strip() or MISSING_ANSWER
        faqs.append({"question": question, "answer": answer})
    return faqs


def _extract_pairs(text: str) -> list[dict[str, str]]:
    """
    Salvage question/answer pairs from malformed JSON-ish model output.
    """
    questions = list(_QUESTION_RE.finditer(text))
    answers = list(_ANSWER_RE.finditer(text))
    faqs: list[dict[str, str]] = []
    for i, match in enumerate(questions):
        end = questions[i + 1].start() if i + 1 < len(questions) else len(text)
        answer = next((a for a in answers if match.end() <= a.start() < end), None)
        faqs.append(
            {
                "question": _unescape(match.group(1)).strip(),
                "answer": _unescape(answer.group(1)).strip() if answer else MISSING_ANSWER,
            }
        )
    return [f for f in faqs if f["question"]]


def parse_faqs(text: str) -> list[dict[str, str]]:
    """
    Parse model output into FAQ items.

    Tries the first `[...]` block as JSON, then the whole text, then regex
    extraction. Returns an empty list when nothing usable is found.
    """
    raw = (text or "").strip()
    if not raw:
        return []

    match = _ARRAY_RE.search(raw)
    for candidate in (match.group(0) if match else None, raw):
        if candidate is None:
            continue
        try:
            faqs = _clean_faqs(json.loads(candidate))
        except json.JSONDecodeError:
            continue
        if faqs:
            return faqs

    return _extract_pairs(raw)


async def _require_api_key() -> str:
    api_key = await api_keys_service.get_active_key(OPENAI_SERVICE)
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="OpenAI API key is not configured",
        )
    return api_key


async def _load_listing(listing_id: int) -> dict:
    listing = await listings_repository.get_listing(listing_id)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found.")
    return listing


async def generate_description(listing_id: int) -> dict:
    listing = await _load_listing(listing_id)
    api_key = await _require_api_key()

    template = await prompts_service.template_for("description")
    user_prompt = prompts_service.render(template, prompts.template_values(listing))

    try:
        description = await openai.chat_text(
            api_key=api_key,
            system_prompt=prompts.description_system_prompt(),
            user_prompt=user_prompt,
            temperature=generation_temperature(),
            max_output_tokens=description_max_output_tokens(),
        )
    except openai.OpenAIError as exc:
        logger.warning("description_generation_failed listing_id=%s error=%s", listing_id, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate description.") from exc

    await listings_repository.save_description(listing_id, description)
    logger.info("description_generated listing_id=%s chars=%s", listing_id, len(description))
    return {
        "success": True,
        "description": description,
        "message": "Description generated successfully",
    }


async def generate_faq(listing_id: int) -> dict:
    listing = await _load_listing(listing_id)
    api_key = await _require_api_key()

    values = prompts.template_values(listing)
    template = await prompts_service.template_for("faq")
    user_prompt = prompts_service.render(template, values)

    try:
        text = await openai.chat_text(
            api_key=api_key,
            system_prompt=prompts.faq_system_prompt(),
            user_prompt=user_prompt,
            temperature=generation_temperature(),
            max_output_tokens=faq_max_output_tokens(),
        )
    except openai.OpenAIError as exc:
        logger.warning("faq_generation_failed listing_id=%s error=%s", listing_id, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate FAQs.") from exc

    faqs = parse_faqs(text)
    if not faqs:
        logger.warning("faq_parse_fallback listing_id=%s", listing_id)
        faqs = prompts.fallback_faqs(values["name"], values["business_type"])

    updated = await listings_repository.save_faqs(listing_id, faqs)
    logger.info("faq_generated listing_id=%s count=%s", listing_id, len(faqs))
    return {"message": "FAQs generated successfully", "faqs": faqs, "listing": updated}


async def verify_openai() -> dict:
    api_key = await _require_api_key()
    try:
        models = await openai.list_models(api_key=api_key)
    except openai.OpenAIError as exc:
        logger.warning("openai_verify_failed error=%s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"status": "error", "message": str(exc)},
        ) from exc

    return {
        "status": "connected",
        "message": f"Successfully connected to OpenAI API ({len(models)} models available)",
    }
