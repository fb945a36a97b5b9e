# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Wardrobe item domain models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import BaseModelConfig, PartialUpdateModel


class ClothingCategory(str, Enum):
    """Top-level wardrobe categories."""

    TOPS = "tops"
    BOTTOMS = "bottoms"
    DRESSES = "dresses"
    OUTERWEAR = "outerwear"
    SHOES = "shoes"
    ACCESSORIES = "accessories"


class Season(str, Enum):
    """Seasons an item or outfit is meant for."""

    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"
    ALL = "all"


class WardrobeItemBase(BaseModelConfig):
    """Fields shared by stored items and creation payloads."""

    name: str = Field(..., min_length=1, max_length=200)
    category: ClothingCategory
    subcategory: str | None = Field(default=None, max_length=100)
    color: str | None = Field(default=None, max_length=50)
    season: Season | None = Field(default=None)
    image_url: str | None = Field(default=None, max_length=2048)
    tags: list[str] = Field(default_factory=list)
    favorite: bool = Field(default=False)


class WardrobeItemCreate(WardrobeItemBase):
    """Payload for adding an item to the wardrobe."""


class WardrobeItemUpdate(PartialUpdateModel):
    """Partial update of a wardrobe item."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    category: ClothingCategory | None = None
    subcategory: str | None = Field(default=None, max_length=100)
    color: str | None = Field(default=None, max_length=50)
    season: Season | None = None
    image_url: str | None = Field(default=None, max_length=2048)
    tags: list[str] | None = None
    favorite: bool | None = None


class WardrobeItem(WardrobeItemBase):
    """Stored wardrobe item."""

    id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    created_at: datetime | None = Field(default=None)
