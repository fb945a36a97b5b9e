"""Weather and mood preference endpoints."""

from beartype import beartype
from fastapi import APIRouter, Depends, status

from ...models.preferences import (
    MoodPreference,
    MoodPreferenceCreate,
    WeatherPreference,
    WeatherPreferenceCreate,
)
from ...schemas.auth import AuthenticatedIdentity
from ...services.storage import Storage
from ..dependencies import get_storage, require_authenticated
from ..error_handling import ErrorFunnelRoute

router = APIRouter(route_class=ErrorFunnelRoute)


@router.get("/weather")
@beartype
async def list_weather_preferences(
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> list[WeatherPreference]:
    return await storage.get_weather_preferences(identity.id)


@router.post("/weather", status_code=status.HTTP_201_CREATED)
@beartype
async def create_weather_preference(
    payload: WeatherPreferenceCreate,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> WeatherPreference:
    return await storage.create_weather_preference(identity.id, payload)


@router.get("/mood")
@beartype
async def list_mood_preferences(
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> list[MoodPreference]:
    return await storage.get_mood_preferences(identity.id)


@router.post("/mood", status_code=status.HTTP_201_CREATED)
@beartype
async def create_mood_preference(
    payload: MoodPreferenceCreate,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> MoodPreference:
    return await storage.create_mood_preference(identity.id, payload)
