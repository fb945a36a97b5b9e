"""Outfit share links.

A share id is a signed token naming the outfit, so links cannot be forged
or enumerated and need no storage of their own.
"""

from beartype import beartype
from fastapi import APIRouter, Depends, Request

from ...core.errors import ApiError
from ...core.security import Security
from ...models.base import BaseModelConfig
from ...models.outfit import SharedOutfit, SharedOutfitItem
from ...schemas.auth import AuthenticatedIdentity
from ...services.storage import Storage
from ..dependencies import ensure_owner, get_security, get_storage, require_authenticated
from ..error_handling import ErrorFunnelRoute

router = APIRouter(route_class=ErrorFunnelRoute)


class ShareLinkResponse(BaseModelConfig):
    message: str
    shareable_link: str
    share_id: str


@router.post("/{outfit_id}/share")
@beartype
async def share_outfit(
    outfit_id: int,
    request: Request,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
    security: Security = Depends(get_security),
) -> ShareLinkResponse:
    """Create a public link for one of the caller's outfits."""
    outfit = await storage.get_outfit(outfit_id)
    if outfit is None:
        raise ApiError.not_found("Outfit not found")
    ensure_owner(outfit.user_id, identity)

    share_id = security.create_share_token(outfit.id)
    base_url = str(request.base_url).rstrip("/")
    return ShareLinkResponse(
        message="Outfit shared successfully",
        shareable_link=f"{base_url}/shared-outfit/{share_id}",
        share_id=share_id,
    )


@router.get("/shared/{share_id}")
@beartype
async def get_shared_outfit(
    share_id: str,
    storage: Storage = Depends(get_storage),
    security: Security = Depends(get_security),
) -> SharedOutfit:
    """Public, sanitized view of a shared outfit."""
    payload = security.decode_share_token(share_id)
    if payload is None:
        raise ApiError.bad_request("Invalid share ID")

    outfit = await storage.get_outfit(payload.outfit_id)
    if outfit is None:
        raise ApiError.not_found("Shared outfit not found")

    items: list[SharedOutfitItem] = []
    for item_id in outfit.items:
        item = await storage.get_wardrobe_item(item_id)
        # Deleted items, or items that no longer belong to the owner, are dropped
        if item is None or item.user_id != outfit.user_id:
            continue
        items.append(
            SharedOutfitItem(
                id=item.id,
                name=item.name,
                category=item.category,
                subcategory=item.subcategory,
                color=item.color,
                season=item.season,
                image_url=item.image_url,
                tags=item.tags,
            )
        )

    return SharedOutfit(
        id=outfit.id,
        name=outfit.name,
        items=items,
        occasion=outfit.occasion or "casual",
        season=outfit.season.value if outfit.season else "all",
        weather_conditions=outfit.weather_conditions,
        mood=outfit.mood or "neutral",
    )
