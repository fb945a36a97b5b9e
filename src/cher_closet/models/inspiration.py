"""Style inspiration models."""

from datetime import datetime

from pydantic import Field

from .base import BaseModelConfig


class Inspiration(BaseModelConfig):
    """Curated look shown to every visitor."""

    id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    description: str | None = None
    image_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    category: str | None = None
    created_at: datetime | None = None
