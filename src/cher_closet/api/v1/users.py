"""Account administration endpoints."""

from beartype import beartype
from fastapi import APIRouter, Depends

from ...core.errors import ApiError
from ...models.user import User, UserRole
from ...models.wardrobe import WardrobeItem
from ...schemas.auth import AuthenticatedIdentity
from ...services.storage import Storage
from ..dependencies import get_storage, require_role, require_self_or_admin
from ..error_handling import ErrorFunnelRoute

router = APIRouter(route_class=ErrorFunnelRoute)


@router.get("")
@beartype
async def list_users(
    identity: AuthenticatedIdentity = Depends(require_role(UserRole.ADMIN)),
    storage: Storage = Depends(get_storage),
) -> list[User]:
    """Every account (admins only)."""
    return await storage.list_users()


@router.get("/{user_id}")
@beartype
async def get_user(
    user_id: int,
    identity: AuthenticatedIdentity = Depends(require_self_or_admin()),
    storage: Storage = Depends(get_storage),
) -> User:
    user = await storage.get_user(user_id)
    if user is None:
        raise ApiError.not_found("User not found")
    return user


@router.get("/{user_id}/wardrobe")
@beartype
async def get_user_wardrobe(
    user_id: int,
    identity: AuthenticatedIdentity = Depends(require_self_or_admin()),
    storage: Storage = Depends(get_storage),
) -> list[WardrobeItem]:
    """A user's wardrobe, visible to its owner and to admins."""
    return await storage.get_wardrobe_items(user_id)
