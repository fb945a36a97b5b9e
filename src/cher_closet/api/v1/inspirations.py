"""Public style inspiration endpoints."""

from beartype import beartype
from fastapi import APIRouter, Depends

from ...core.errors import ApiError
from ...models.inspiration import Inspiration
from ...services.storage import Storage
from ..dependencies import get_storage
from ..error_handling import ErrorFunnelRoute

router = APIRouter(route_class=ErrorFunnelRoute)


@router.get("")
@beartype
async def list_inspirations(storage: Storage = Depends(get_storage)) -> list[Inspiration]:
    return await storage.get_inspirations()


@router.get("/{inspiration_id}")
@beartype
async def get_inspiration(
    inspiration_id: int, storage: Storage = Depends(get_storage)
) -> Inspiration:
    inspiration = await storage.get_inspiration(inspiration_id)
    if inspiration is None:
        raise ApiError.not_found("Inspiration not found")
    return inspiration
