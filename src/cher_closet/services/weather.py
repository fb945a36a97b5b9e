# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Current-weather adapter and weather-appropriate clothing rules."""

import logging
from collections.abc import Iterable
from typing import Any

import httpx
from beartype import beartype

from ..core.result_types import Err, Ok, Result
from ..models.wardrobe import ClothingCategory, WardrobeItem
from ..schemas.weather import WeatherReport, WeatherType

logger = logging.getLogger(__name__)

HOT_THRESHOLD_C = 28.0
COLD_THRESHOLD_C = 5.0
WINDY_THRESHOLD_MS = 10.0

RAIN_CONDITIONS = frozenset({"Rain", "Drizzle", "Thunderstorm"})

# Subcategory keywords that rule an item out for a weather type.
UNSUITABLE_SUBCATEGORIES: dict[WeatherType, tuple[str, ...]] = {
    WeatherType.HOT: (
        "sweater", "hoodie", "coat", "parka", "boots", "scarf", "turtleneck",
        "wool", "fleece", "gloves", "beanie",
    ),
    WeatherType.COLD: (
        "shorts", "tank", "sandal", "flip flop", "sundress", "crop", "linen",
    ),
    WeatherType.SNOWY: (
        "shorts", "tank", "sandal", "flip flop", "sundress", "crop", "linen",
        "canvas", "suede", "heels",
    ),
    WeatherType.RAINY: ("sandal", "flip flop", "suede", "canvas", "silk"),
    WeatherType.WINDY: ("sundress", "mini skirt", "wide brim", "umbrella"),
    WeatherType.SUNNY: ("parka", "snow boots", "raincoat", "rain boots"),
    WeatherType.CLOUDY: ("snow boots",),
}

# Whole categories that make no sense for a weather type.
UNSUITABLE_CATEGORIES: dict[WeatherType, frozenset[ClothingCategory]] = {
    WeatherType.HOT: frozenset({ClothingCategory.OUTERWEAR}),
}


@beartype
def classify_weather(condition: str, temperature: float, wind_speed: float) -> WeatherType:
    """Reduce provider conditions to a ``WeatherType``.

    Precipitation wins over temperature, temperature extremes over wind, and
    anything left is either sunny (clear sky) or cloudy.
    """
    if condition == "Snow":
        return WeatherType.SNOWY
    if condition in RAIN_CONDITIONS:
        return WeatherType.RAINY
    if temperature >= HOT_THRESHOLD_C:
        return WeatherType.HOT
    if temperature <= COLD_THRESHOLD_C:
        return WeatherType.COLD
    if wind_speed >= WINDY_THRESHOLD_MS:
        return WeatherType.WINDY
    if condition == "Clear":
        return WeatherType.SUNNY
    return WeatherType.CLOUDY


@beartype
def is_appropriate_for_weather(
    category: str, subcategory: str | None, weather_type: WeatherType
) -> bool:
    """Decide whether an item of clothing suits the given weather."""
    try:
        parsed_category: ClothingCategory | None = ClothingCategory(category)
    except ValueError:
        parsed_category = None
    if parsed_category in UNSUITABLE_CATEGORIES.get(weather_type, frozenset()):
        return False

    text = (subcategory or "").lower()
    if not text:
        return True
    return not any(
        keyword in text for keyword in UNSUITABLE_SUBCATEGORIES.get(weather_type, ())
    )


@beartype
def group_weather_suggestions(
    items: Iterable[WardrobeItem], weather_type: WeatherType
) -> dict[str, list[WardrobeItem]]:
    """Keep the items that suit the weather, grouped by category."""
    grouped: dict[str, list[WardrobeItem]] = {}
    for item in items:
        if is_appropriate_for_weather(item.category.value, item.subcategory, weather_type):
            grouped.setdefault(item.category.value, []).append(item)
    return grouped


@beartype
def sample_weather(location: str) -> WeatherReport:
    """Fixed report served when no provider key is configured."""
    return WeatherReport(
        location=location,
        temperature=22.0,
        feels_like=22.0,
        humidity=55,
        wind_speed=3.0,
        condition="Clouds",
        description="scattered clouds",
        type=WeatherType.CLOUDY,
        is_sample=True,
    )


class WeatherClient:
    """OpenWeatherMap client that reports failures as ``Err`` values."""

    @beartype
    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    @beartype
    async def get_weather(self, location: str) -> Result[WeatherReport, str]:
        """Fetch current conditions for a location."""
        location = location.strip()
        if not location:
            return Err("Location is required")
        if not self._api_key:
            return Ok(sample_weather(location))

        try:
            response = await self._http.get(
                self._base_url,
                params={"q": location, "appid": self._api_key, "units": "metric"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Weather provider request failed for {location!r}: {e}")
            return Err("Weather service is unavailable")

        if response.status_code == 404:
            return Err(f"Location not found: {location}")
        if response.status_code != 200:
            logger.error(
                f"Weather provider answered {response.status_code} for {location!r}"
            )
            return Err("Weather service is unavailable")

        try:
            return Ok(self._parse(location, response.json()))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Unexpected weather payload for {location!r}: {e}")
            return Err("Weather service returned an unexpected response")

    @staticmethod
    def _parse(location: str, data: dict[str, Any]) -> WeatherReport:
        main = data["main"]
        summary = data["weather"][0]
        temperature = float(main["temp"])
        wind_speed = float(data.get("wind", {}).get("speed", 0.0))
        condition = str(summary["main"])
        return WeatherReport(
            location=str(data.get("name") or location),
            temperature=temperature,
            feels_like=main.get("feels_like"),
            humidity=main.get("humidity"),
            wind_speed=wind_speed,
            condition=condition,
            description=str(summary.get("description", "")),
            type=classify_weather(condition, temperature, wind_speed),
        )
