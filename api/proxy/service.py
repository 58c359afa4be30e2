"""
Development proxies.

- `fetch_external`: GET any absolute URL and relay its JSON (browser CORS workaround)
- `forward`: replay an `/api/proxy/...` request against DEV_PROXY_UPSTREAM

Both relay the upstream status code. Transport failures become 502.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from core import settings

logger = logging.getLogger(__name__)

USER_AGENT = "DirectoryAdminProxy/1.0"
DEFAULT_UPSTREAM = "http://localhost:8000"

# Hop-by-hop and length headers are recomputed by the client/server.
_SKIP_REQUEST_HEADERS = {"host", "content-length", "connection", "accept-encoding", "origin", "referer"}


def upstream_base() -> str:
    return settings.env_str("DEV_PROXY_UPSTREAM", DEFAULT_UPSTREAM).rstrip("/")


def timeout_s() -> float:
    return settings.env_float("DEV_PROXY_TIMEOUT_S", 30.0)


def upstream_url(base: str, path: str) -> str:
    """
    Join the upstream base with a proxied path: ("http://x", "api/leads") -> "http://x/api/leads".
    """
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


def response_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def forward_headers(headers: dict[str, str]) -> dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() not in _SKIP_REQUEST_HEADERS}


async def fetch_external(url: str | None) -> JSONResponse:
    url = (url or "").strip()
    if not url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="URL query parameter is required.")
    if not url.lower().startswith(("http://", "https://")):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="URL must be absolute http(s).")

    logger.info("proxy_fetch url=%s", url)
    try:
        async with httpx.AsyncClient(timeout=timeout_s(), follow_redirects=True) as client:
            resp = await client.get(url, headers={"User-Agent": USER_AGENT})
    except httpx.HTTPError as exc:
        logger.warning("proxy_fetch_failed url=%s error=%s", url, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "No response from external URL", "details": str(exc)},
        )

    if resp.is_error:
        return JSONResponse(
            status_code=resp.status_code,
            content={"error": "Error fetching data from external URL", "details": response_body(resp)},
        )
    return JSONResponse(status_code=resp.status_code, content=response_body(resp))


async def forward(
    *,
    method: str,
    path: str,
    query: str,
    headers: dict[str, str],
    body: bytes,
) -> JSONResponse:
    url = upstream_url(upstream_base(), path)
    if query:
        url = f"{url}?{query}"

    logger.info("proxy_forward method=%s url=%s", method, url)
    try:
        async with httpx.AsyncClient(timeout=timeout_s()) as client:
            resp = await client.request(method, url, headers=forward_headers(headers), content=body or None)
    except httpx.HTTPError as exc:
        logger.warning("proxy_forward_failed url=%s error=%s", url, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "No response received from server", "details": str(exc)},
        )

    return JSONResponse(status_code=resp.status_code, content=response_body(resp))
