"""
Prompt builders for listing content generation.
"""

from __future__ import annotations

from typing import Any


def description_system_prompt() -> str:
    """
    Long-form copywriting for a single business listing.
    """
    return (
        "You are a professional copywriter for a local business directory.\n"
        "Write factual, engaging prose about the business you are given.\n"
        "Never invent awards, prices, or opening hours.\n"
        "Return only the description text, without headings or quotes."
    )


def faq_system_prompt() -> str:
    return (
        "You write FAQ sections for a local business directory.\n"
        "Return ONLY a valid JSON array of objects with \"question\" and \"answer\" string fields.\n"
        "Do not wrap the JSON in markdown fences and do not add any other text."
    )


def rating_info(rating: Any) -> str:
    if rating is None or rating == "":
        return ""
    return f"with a rating of {rating} out of 5"


def template_values(listing: dict[str, Any]) -> dict[str, Any]:
    """
    Placeholder values for a listing, with neutral fallbacks for missing fields.
    """
    return {
        "name": listing.get("name") or "",
        "business_type": listing.get("main_type") or "business",
        "location": listing.get("formatted_address") or listing.get("vicinity") or "various locations",
        "rating_info": rating_info(listing.get("rating")),
        "description": listing.get("description") or listing.get("editorial_summary") or "",
    }


def fallback_faqs(name: str, business_type: str) -> list[dict[str, str]]:
    return [
        {
            "question": f"What services does {name} offer?",
            "answer": f"As a {business_type}, {name} offers a comprehensive range of services "
            "tailored to meet customer needs.",
        },
        {
            "question": f"What are the operating hours for {name}?",
            "answer": f"Please contact {name} directly for their current operating hours as they may vary.",
        },
        {
            "question": f"Is {name} available for appointments or consultations?",
            "answer": f"Yes, {name} generally offers consultations. Contact them directly to schedule.",
        },
    ]
