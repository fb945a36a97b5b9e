"""Outfit calendar endpoints."""

from datetime import date

from beartype import beartype
from fastapi import APIRouter, Depends, Query, Response, status

from ...core.errors import ApiError
from ...models.base import BaseModelConfig
from ...models.calendar import CalendarEntry, CalendarEntryCreate, PlannedOutfit
from ...schemas.auth import AuthenticatedIdentity
from ...services.storage import Storage
from ..dependencies import ensure_owner, get_storage, require_authenticated
from ..error_handling import ErrorFunnelRoute

router = APIRouter(route_class=ErrorFunnelRoute)


class ScheduledResponse(BaseModelConfig):
    message: str
    planned_outfit: CalendarEntry


@router.get("")
@beartype
async def list_planned_outfits(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> list[PlannedOutfit]:
    """Outfits planned between two dates, inclusive."""
    if start_date is None or end_date is None:
        raise ApiError.bad_request("Start date and end date are required")
    if start_date > end_date:
        raise ApiError.bad_request("Start date must not be after end date")

    entries = await storage.get_calendar_entries(identity.id, start_date, end_date)
    outfits = {outfit.id: outfit for outfit in await storage.get_outfits(identity.id)}
    return [
        PlannedOutfit(entry=entry, outfit=outfits.get(entry.outfit_id))
        for entry in entries
    ]


@router.post("", status_code=status.HTTP_201_CREATED)
@beartype
async def schedule_outfit(
    payload: CalendarEntryCreate,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> ScheduledResponse:
    outfit = await storage.get_outfit(payload.outfit_id)
    if outfit is None:
        raise ApiError.not_found("Outfit not found")
    ensure_owner(outfit.user_id, identity)

    entry = await storage.create_calendar_entry(
        identity.id, outfit.id, payload.planned_date, payload.notes
    )
    return ScheduledResponse(
        message="Outfit scheduled successfully", planned_outfit=entry
    )


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
@beartype
async def unschedule_outfit(
    entry_id: int,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> Response:
    entry = await storage.get_calendar_entry(entry_id)
    if entry is None:
        raise ApiError.not_found("Planned outfit not found")
    ensure_owner(entry.user_id, identity)
    await storage.delete_calendar_entry(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
