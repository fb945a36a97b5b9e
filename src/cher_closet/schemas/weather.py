"""Weather report schemas."""

from enum import Enum

from pydantic import Field

from ..models.base import BaseModelConfig
from ..models.wardrobe import WardrobeItem


class WeatherType(str, Enum):
    """Coarse weather buckets used to filter clothing."""

    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    SNOWY = "snowy"
    WINDY = "windy"
    HOT = "hot"
    COLD = "cold"


class WeatherReport(BaseModelConfig):
    """Current conditions at a location."""

    location: str
    temperature: float = Field(..., description="Degrees Celsius")
    feels_like: float | None = Field(default=None, description="Degrees Celsius")
    humidity: int | None = Field(default=None, ge=0, le=100)
    wind_speed: float = Field(default=0.0, ge=0, description="Metres per second")
    condition: str = Field(..., description="Provider condition group, e.g. 'Rain'")
    description: str = Field(default="")
    type: WeatherType
    is_sample: bool = Field(
        default=False, description="True when no provider key is configured"
    )


class WeatherSuggestions(BaseModelConfig):
    """Wardrobe items that suit the current weather, grouped by category."""

    weather: WeatherReport
    suggestions: dict[str, list[WardrobeItem]] = Field(default_factory=dict)
