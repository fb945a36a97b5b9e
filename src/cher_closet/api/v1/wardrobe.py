# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Wardrobe item endpoints.

All routes require a session; items are only visible to their owner.
"""

from beartype import beartype
from fastapi import APIRouter, Depends, Response, status

from ...core.errors import ApiError
from ...models.wardrobe import WardrobeItem, WardrobeItemCreate, WardrobeItemUpdate
from ...schemas.auth import AuthenticatedIdentity
from ...services.storage import Storage
from ..dependencies import ensure_owner, get_storage, require_authenticated
from ..error_handling import ErrorFunnelRoute

router = APIRouter(route_class=ErrorFunnelRoute)

NOT_FOUND_MESSAGE = "Wardrobe item not found"


async def _owned_item(
    item_id: int, identity: AuthenticatedIdentity, storage: Storage
) -> WardrobeItem:
    item = await storage.get_wardrobe_item(item_id)
    if item is None:
        raise ApiError.not_found(NOT_FOUND_MESSAGE)
    ensure_owner(item.user_id, identity)
    return item


@router.get("")
@beartype
async def list_wardrobe_items(
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> list[WardrobeItem]:
    return await storage.get_wardrobe_items(identity.id)


@router.post("", status_code=status.HTTP_201_CREATED)
@beartype
async def create_wardrobe_item(
    payload: WardrobeItemCreate,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> WardrobeItem:
    return await storage.create_wardrobe_item(identity.id, payload)


@router.get("/{item_id}")
@beartype
async def get_wardrobe_item(
    item_id: int,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> WardrobeItem:
    return await _owned_item(item_id, identity, storage)


@router.patch("/{item_id}")
@beartype
async def update_wardrobe_item(
    item_id: int,
    payload: WardrobeItemUpdate,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> WardrobeItem:
    await _owned_item(item_id, identity, storage)
    updated = await storage.update_wardrobe_item(item_id, payload)
    if updated is None:
        raise ApiError.not_found(NOT_FOUND_MESSAGE)
    return updated


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
@beartype
async def delete_wardrobe_item(
    item_id: int,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> Response:
    await _owned_item(item_id, identity, storage)
    await storage.delete_wardrobe_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
