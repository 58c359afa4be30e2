"""
Listing content generation endpoints (admin).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter(dependencies=[Depends(auth_dependencies.require_admin)])


@router.post("/api/listings/{listing_id}/generate-description")
async def generate_description(listing_id: int) -> dict:
    return await service.generate_description(listing_id)


@router.post("/api/listings/{listing_id}/generate-faq")
async def generate_faq(listing_id: int) -> dict:
    return await service.generate_faq(listing_id)


@router.get("/api/verify-openai")
async def verify_openai() -> dict:
    return await service.verify_openai()
