"""
Navigation menu business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found.")


async def list_items(*, active_only: bool = False) -> list[dict]:
    return await repository.list_items(active_only=active_only)


def _bad_parent(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def check_parent(parent_id: int | None, *, item_id: int | None = None) -> None:
    """
    The parent must exist and, for an existing item, must not sit in the
    item's own subtree.
    """
    if parent_id is None:
        return None
    if parent_id == item_id:
        raise _bad_parent("A menu item cannot be its own parent.")
    if await repository.get_item(parent_id) is None:
        raise _bad_parent("Parent menu item does not exist.")
    if item_id is not None and await repository.in_subtree(item_id, parent_id):
        raise _bad_parent("A menu item cannot be nested under one of its own children.")
    return None


async def create_item(payload: schemas.CreateMenuItemRequest) -> dict:
    fields = payload.model_dump()
    fields["label"] = fields["label"].strip()
    fields["url"] = fields["url"].strip()
    await check_parent(payload.parent_id)
    return await repository.create_item(fields)


async def update_item(item_id: int, payload: schemas.UpdateMenuItemRequest) -> dict:
    current = await repository.get_item(item_id)
    if current is None:
        raise _not_found()

    fields = payload.model_dump(exclude_unset=True)
    # label/url/target/is_active are NOT NULL columns; null means "leave as is".
    for key in ("label", "url", "position", "target", "is_active"):
        if key in fields and fields[key] is None:
            del fields[key]
    await check_parent(fields.get("parent_id"), item_id=item_id)

    if not fields:
        return current

    row = await repository.update_item(item_id, fields)
    if row is None:
        raise _not_found()
    return row


async def delete_item(item_id: int) -> dict:
    if not await repository.delete_item(item_id):
        raise _not_found()
    logger.info("menu_item_deleted id=%s", item_id)
    return {"message": "Menu item deleted successfully"}


async def reorder(items: list[schemas.MenuPosition]) -> dict:
    if not items:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No menu positions provided.")

    updated = await repository.reorder([(item.id, item.position) for item in items])
    logger.info("menu_reordered requested=%s updated=%s", len(items), updated)
    return {"message": "Menu order updated successfully", "updated": updated}
