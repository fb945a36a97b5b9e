"""Weather endpoints and weather-based wardrobe suggestions."""

import logging

from beartype import beartype
from fastapi import APIRouter, Depends, Query

from ...core.config import Settings
from ...core.errors import ApiError
from ...core.result_types import Err
from ...schemas.auth import AuthenticatedIdentity
from ...schemas.weather import WeatherReport, WeatherSuggestions
from ...services.storage import Storage
from ...services.weather import WeatherClient, group_weather_suggestions
from ..dependencies import (
    get_app_settings,
    get_storage,
    get_weather_client,
    require_authenticated,
)
from ..error_handling import ErrorFunnelRoute

logger = logging.getLogger(__name__)

router = APIRouter(route_class=ErrorFunnelRoute)


@router.get("")
@beartype
async def current_weather(
    location: str | None = Query(default=None, max_length=100),
    settings: Settings = Depends(get_app_settings),
    client: WeatherClient = Depends(get_weather_client),
) -> WeatherReport:
    """Current weather; public."""
    result = await client.get_weather(location or settings.default_weather_location)
    if isinstance(result, Err):
        raise ApiError.internal(
            "Failed to fetch weather data",
            error_code="WEATHER_UNAVAILABLE",
            details={"reason": result.error},
        )
    return result.unwrap()


@router.get("/suggestions")
@beartype
async def weather_suggestions(
    location: str | None = Query(default=None, max_length=100),
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    settings: Settings = Depends(get_app_settings),
    client: WeatherClient = Depends(get_weather_client),
    storage: Storage = Depends(get_storage),
) -> WeatherSuggestions:
    """The caller's wardrobe items that suit the current weather."""
    result = await client.get_weather(location or settings.default_weather_location)
    if isinstance(result, Err):
        raise ApiError.bad_request(result.error, error_code="WEATHER_UNAVAILABLE")

    weather = result.unwrap()
    items = await storage.get_wardrobe_items(identity.id)
    return WeatherSuggestions(
        weather=weather,
        suggestions=group_weather_suggestions(items, weather.type),
    )
