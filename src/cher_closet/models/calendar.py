"""Outfit calendar models."""

from datetime import date, datetime

from pydantic import Field

from .base import BaseModelConfig
from .outfit import Outfit


class CalendarEntryCreate(BaseModelConfig):
    """Request to plan an outfit for a day."""

    outfit_id: int = Field(..., ge=1)
    planned_date: date = Field(..., alias="date")
    notes: str | None = Field(default=None, max_length=500)


class CalendarEntry(BaseModelConfig):
    """Stored calendar entry."""

    id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    outfit_id: int = Field(..., ge=1)
    planned_date: date
    notes: str | None = None
    created_at: datetime | None = None


class PlannedOutfit(BaseModelConfig):
    """Calendar entry together with the outfit it schedules."""

    entry: CalendarEntry
    outfit: Outfit | None = None
