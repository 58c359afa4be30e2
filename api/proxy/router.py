"""
Development proxy endpoints. Only mounted when DEV_PROXY_ENABLED is on.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from . import service

router = APIRouter()


@router.get("/proxy")
async def fetch_external(url: str | None = Query(default=None)) -> JSONResponse:
    return await service.fetch_external(url)


@router.api_route("/api/proxy/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def forward(path: str, request: Request) -> JSONResponse:
    return await service.forward(
        method=request.method,
        path=path,
        query=request.url.query,
        headers=dict(request.headers),
        body=await request.body(),
    )
