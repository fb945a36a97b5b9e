"""Outfit endpoints."""

from beartype import beartype
from fastapi import APIRouter, Depends, Response, status

from ...core.errors import ApiError
from ...models.outfit import Outfit, OutfitCreate, OutfitUpdate
from ...schemas.auth import AuthenticatedIdentity
from ...services.storage import Storage
from ..dependencies import ensure_owner, get_storage, require_authenticated
from ..error_handling import ErrorFunnelRoute

router = APIRouter(route_class=ErrorFunnelRoute)

NOT_FOUND_MESSAGE = "Outfit not found"


async def _owned_outfit(
    outfit_id: int, identity: AuthenticatedIdentity, storage: Storage
) -> Outfit:
    outfit = await storage.get_outfit(outfit_id)
    if outfit is None:
        raise ApiError.not_found(NOT_FOUND_MESSAGE)
    ensure_owner(outfit.user_id, identity)
    return outfit


async def _check_items_owned(
    item_ids: list[int], identity: AuthenticatedIdentity, storage: Storage
) -> None:
    """Outfits may only reference the caller's own wardrobe items."""
    owned = {item.id for item in await storage.get_wardrobe_items(identity.id)}
    unknown = sorted(set(item_ids) - owned)
    if unknown:
        raise ApiError.bad_request(
            "Outfit references unknown wardrobe items",
            error_code="UNKNOWN_ITEMS",
            details={"itemIds": unknown},
        )


@router.get("")
@beartype
async def list_outfits(
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> list[Outfit]:
    return await storage.get_outfits(identity.id)


@router.post("", status_code=status.HTTP_201_CREATED)
@beartype
async def create_outfit(
    payload: OutfitCreate,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> Outfit:
    await _check_items_owned(payload.items, identity, storage)
    return await storage.create_outfit(identity.id, payload)


@router.get("/{outfit_id}")
@beartype
async def get_outfit(
    outfit_id: int,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> Outfit:
    return await _owned_outfit(outfit_id, identity, storage)


@router.patch("/{outfit_id}")
@beartype
async def update_outfit(
    outfit_id: int,
    payload: OutfitUpdate,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> Outfit:
    await _owned_outfit(outfit_id, identity, storage)
    if payload.items is not None:
        await _check_items_owned(payload.items, identity, storage)
    updated = await storage.update_outfit(outfit_id, payload)
    if updated is None:
        raise ApiError.not_found(NOT_FOUND_MESSAGE)
    return updated


@router.delete("/{outfit_id}", status_code=status.HTTP_204_NO_CONTENT)
@beartype
async def delete_outfit(
    outfit_id: int,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> Response:
    await _owned_outfit(outfit_id, identity, storage)
    await storage.delete_outfit(outfit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
