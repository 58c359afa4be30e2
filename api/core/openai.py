"""
OpenAI HTTP client helpers.

Used endpoints:
- POST /chat/completions -> {"choices": [{"message": {"content": "..."}}]}
- GET  /models           -> {"data": [{"id": "..."}]}
"""

from __future__ import annotations

from typing import Any

import httpx

from . import settings

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"


# OpenAI failures are explicit and separable from other runtime errors.
class OpenAIError(RuntimeError):
    pass


def base_url() -> str:
    return settings.env_str("OPENAI_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


def default_model() -> str:
    return settings.env_str("OPENAI_MODEL", DEFAULT_MODEL)


def timeout_s() -> float:
    return settings.env_float("OPENAI_TIMEOUT_S", 60.0)


def _headers(api_key: str) -> dict[str, str]:
    api_key = (api_key or "").strip()
    if not api_key:
        raise OpenAIError("OpenAI API key is empty.")
    return {"Authorization": f"Bearer {api_key}"}


def _json_body(resp: httpx.Response) -> dict[str, Any]:
    try:
        data = resp.json()
    except ValueError as exc:
        raise OpenAIError(f"OpenAI returned a non-JSON body: {resp.text[:200]}") from exc
    if not isinstance(data, dict):
        raise OpenAIError("OpenAI returned an unexpected JSON body.")
    return data


async def chat_text(
    *,
    api_key: str,
    system_prompt: str,
    user_prompt: str,
    model: str | None = None,
    temperature: float | None = None,
    max_output_tokens: int | None = None,
) -> str:
    """
    Generate one assistant message from a system + user prompt pair.
    """
    payload: dict[str, Any] = {
        "model": (model or default_model()).strip(),
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
    }
    if temperature is not None:
        payload["temperature"] = float(temperature)
    if max_output_tokens is not None:
        payload["max_tokens"] = int(max_output_tokens)

    try:
        async with httpx.AsyncClient(base_url=base_url(), timeout=timeout_s()) as client:
            resp = await client.post("/chat/completions", json=payload, headers=_headers(api_key))
    except httpx.HTTPError as exc:
        raise OpenAIError(f"OpenAI request failed: {exc}") from exc

    if resp.status_code != 200:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:500]
        raise OpenAIError(f"OpenAI chat request failed: {resp.status_code} {body}")

    data = _json_body(resp)
    choices = data.get("choices")
    if isinstance(choices, list) and choices:
        message = (choices[0] or {}).get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str) and content.strip():
                return content.strip()

    raise OpenAIError("OpenAI returned an empty chat response.")


async def list_models(*, api_key: str) -> list[str]:
    try:
        async with httpx.AsyncClient(base_url=base_url(), timeout=timeout_s()) as client:
            resp = await client.get("/models", headers=_headers(api_key))
    except httpx.HTTPError as exc:
        raise OpenAIError(f"OpenAI request failed: {exc}") from exc

    if resp.status_code != 200:
        raise OpenAIError(f"OpenAI models request failed: {resp.status_code} {resp.text[:300]}")

    data = _json_body(resp)
    models = data.get("data")
    if not isinstance(models, list):
        return []
    return [str(m.get("id")) for m in models if isinstance(m, dict) and m.get("id")]
