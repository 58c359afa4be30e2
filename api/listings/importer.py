"""
Bulk import of Google Places results into the directory.

Input items follow the Places "details" shape:
- geometry.location.{lat,lng}
- types[0] becomes main_type
- editorial_summary.overview
- reviews / photos / opening_hours.periods are replaced when present

The whole batch runs in one transaction; each item gets its own savepoint so
one bad place is reported without discarding the others.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from core import db

from . import repository

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB


class ImportPayloadError(ValueError):
    pass


@dataclass
class ImportStats:
    processed: int = 0
    inserted: int = 0
    updated: int = 0
    errors: list[dict] = field(default_factory=list)

    def as_response(self) -> dict:
        return {
            "message": "Listings import process completed.",
            "processed": self.processed,
            "inserted": self.inserted,
            "updated": self.updated,
            "failed": len(self.errors),
            "errors": self.errors,
        }


def _float_or_none(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int_or_none(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_place(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Flatten one Places result into listing columns.
    """
    google_place_id = str(raw.get("google_place_id") or raw.get("place_id") or "").strip()
    if not google_place_id:
        raise ImportPayloadError("google_place_id is required.")
    name = str(raw.get("name") or "").strip()
    if not name:
        raise ImportPayloadError("name is required.")

    location = ((raw.get("geometry") or {}).get("location")) or {}
    types = [str(t) for t in (raw.get("types") or []) if t]
    summary = raw.get("editorial_summary")
    overview = summary.get("overview") if isinstance(summary, dict) else None

    return {
        "google_place_id": google_place_id,
        "place_id": raw.get("place_id"),
        "name": name,
        "formatted_address": raw.get("formatted_address"),
        "latitude": _float_or_none(location.get("lat")),
        "longitude": _float_or_none(location.get("lng")),
        "phone_number": raw.get("formatted_phone_number") or raw.get("phone_number"),
        "website": raw.get("website"),
        "rating": _float_or_none(raw.get("rating")),
        "user_ratings_total": _int_or_none(raw.get("user_ratings_total")),
        "main_type": types[0] if types else None,
        "types": types,
        "editorial_summary": overview,
    }


def parse_periods(raw: dict[str, Any]) -> list[dict] | None:
    hours = raw.get("opening_hours")
    if not isinstance(hours, dict) or not isinstance(hours.get("periods"), list):
        return None

    periods = []
    for period in hours["periods"]:
        opened = period.get("open") or {}
        closed = period.get("close") or {}
        periods.append(
            {
                "open_day": _int_or_none(opened.get("day")),
                "open_time": opened.get("time"),
                "close_day": _int_or_none(closed.get("day")),
                "close_time": closed.get("time"),
            }
        )
    return periods


def decode_upload(data: bytes) -> list[dict]:
    if len(data) > MAX_UPLOAD_BYTES:
        raise ImportPayloadError(f"File too large. Max is {MAX_UPLOAD_BYTES} bytes.")
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ImportPayloadError("File is not valid UTF-8 JSON.") from exc

    # Accept either a bare array or a Places search response ({"results": [...]}).
    if isinstance(payload, dict) and isinstance(payload.get("results"), list):
        payload = payload["results"]
    return validate_batch(payload)


def validate_batch(payload: Any) -> list[dict]:
    if not isinstance(payload, list) or not payload:
        raise ImportPayloadError("No listings data or invalid format.")
    return payload


async def import_places(items: list[dict]) -> ImportStats:
    stats = ImportStats(processed=len(items))

    async with db.transaction() as conn:
        for raw in items:
            place_id = (raw.get("google_place_id") or raw.get("place_id")) if isinstance(raw, dict) else None
            try:
                if not isinstance(raw, dict):
                    raise ImportPayloadError("Listing entry must be an object.")
                place = parse_place(raw)
                # Nested transaction == savepoint; a failed item rolls back alone.
                async with conn.transaction():
                    inserted = await repository.upsert_place(conn, place)
                    reviews = raw.get("reviews")
                    if isinstance(reviews, list) and reviews:
                        await repository.replace_reviews(conn, place["google_place_id"], reviews)
                    photos = raw.get("photos")
                    if isinstance(photos, list) and photos:
                        await repository.replace_photos(conn, place["google_place_id"], photos)
                    periods = parse_periods(raw)
                    if periods is not None:
                        await repository.replace_opening_periods(conn, place["google_place_id"], periods)
            except Exception as exc:
                logger.warning("import_item_failed google_place_id=%s error=%s", place_id, exc)
                stats.errors.append({"google_place_id": place_id, "error": str(exc)})
                continue

            if inserted:
                stats.inserted += 1
            else:
                stats.updated += 1

    logger.info(
        "import_complete processed=%s inserted=%s updated=%s failed=%s",
        stats.processed,
        stats.inserted,
        stats.updated,
        len(stats.errors),
    )
    return stats
