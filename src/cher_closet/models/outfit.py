"""Outfit domain models."""

from datetime import datetime

from pydantic import Field

from .base import BaseModelConfig, PartialUpdateModel
from .wardrobe import ClothingCategory, Season


class OutfitBase(BaseModelConfig):
    """Fields shared by stored outfits and creation payloads."""

    name: str = Field(..., min_length=1, max_length=200)
    items: list[int] = Field(default_factory=list, description="Wardrobe item ids")
    occasion: str | None = Field(default=None, max_length=100)
    season: Season | None = Field(default=None)
    weather_conditions: list[str] = Field(default_factory=list)
    mood: str | None = Field(default=None, max_length=100)
    favorite: bool = Field(default=False)


class OutfitCreate(OutfitBase):
    """Payload for composing a new outfit."""


class OutfitUpdate(PartialUpdateModel):
    """Partial update of an outfit."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    items: list[int] | None = None
    occasion: str | None = Field(default=None, max_length=100)
    season: Season | None = None
    weather_conditions: list[str] | None = None
    mood: str | None = Field(default=None, max_length=100)
    favorite: bool | None = None


class Outfit(OutfitBase):
    """Stored outfit."""

    id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    created_at: datetime | None = Field(default=None)


class SharedOutfitItem(BaseModelConfig):
    """Wardrobe item as exposed on a public share link."""

    id: int
    name: str
    category: ClothingCategory
    subcategory: str | None = None
    color: str | None = None
    season: Season | None = None
    image_url: str | None = None
    tags: list[str] = Field(default_factory=list)


class SharedOutfit(BaseModelConfig):
    """Outfit with its owner's details removed."""

    id: int
    name: str
    items: list[SharedOutfitItem] = Field(default_factory=list)
    occasion: str = Field(default="casual")
    season: str = Field(default="all")
    weather_conditions: list[str] = Field(default_factory=list)
    mood: str = Field(default="neutral")
    shared: bool = Field(default=True)
