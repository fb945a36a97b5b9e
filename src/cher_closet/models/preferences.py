"""Weather and mood preference models."""

from datetime import datetime

from pydantic import Field

from .base import BaseModelConfig
from .wardrobe import ClothingCategory


class WeatherPreferenceCreate(BaseModelConfig):
    """Categories a user reaches for in a given weather."""

    weather_type: str = Field(..., min_length=1, max_length=50)
    preferred_categories: list[ClothingCategory] = Field(default_factory=list)


class WeatherPreference(WeatherPreferenceCreate):
    id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    created_at: datetime | None = None


class MoodPreferenceCreate(BaseModelConfig):
    """Colors and styles a user favours for a mood."""

    mood: str = Field(..., min_length=1, max_length=50)
    preferred_colors: list[str] = Field(default_factory=list)
    preferred_styles: list[str] = Field(default_factory=list)


class MoodPreference(MoodPreferenceCreate):
    id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    created_at: datetime | None = None
