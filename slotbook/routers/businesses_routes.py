# slotbook/routers/businesses_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from slotbook import booking
from slotbook.config import Settings, get_settings
from slotbook.deps import get_repository, http_error
from slotbook.errors import PersistenceFailure
from slotbook.hours import format_weekly_hours, parse_date
from slotbook.repository import SQLModelBookingRepository
from slotbook.schemas import (
    AvailableSlotsResponse,
    FormattedDayHours,
    WeeklyHourPublic,
    WeeklyHoursUpdate,
)

router = APIRouter(
    prefix="/businesses",
    tags=["businesses"],
)


@router.get("/{business_id}/hours", response_model=List[WeeklyHourPublic])
def get_hours(
    business_id: str,
    repo: SQLModelBookingRepository = Depends(get_repository),
):
    try:
        return repo.list_weekly_hours(business_id)
    except PersistenceFailure as exc:
        raise http_error(exc)


@router.put("/{business_id}/hours", response_model=List[WeeklyHourPublic])
def update_hours(
    business_id: str,
    update: WeeklyHoursUpdate,
    repo: SQLModelBookingRepository = Depends(get_repository),
):
    days = [h.day_of_week for h in update.hours]
    if len(days) != len(set(days)):
        raise HTTPException(status_code=422, detail="day_of_week cannot contain duplicates")

    try:
        return booking.replace_weekly_hours(repo, business_id, update.hours)
    except PersistenceFailure as exc:
        raise http_error(exc)


@router.get("/{business_id}/hours/formatted", response_model=List[FormattedDayHours])
def get_formatted_hours(
    business_id: str,
    repo: SQLModelBookingRepository = Depends(get_repository),
):
    try:
        return format_weekly_hours(repo.list_weekly_hours(business_id))
    except PersistenceFailure as exc:
        raise http_error(exc)


@router.get("/{business_id}/available-slots", response_model=AvailableSlotsResponse)
def available_slots(
    business_id: str,
    date: str,
    repo: SQLModelBookingRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    # Weekday comes from the Y-M-D parts, never from a timezone-shifted instant
    try:
        on_date = parse_date(date)
    except ValueError:
        raise HTTPException(status_code=422, detail="Invalid date, expected YYYY-MM-DD")

    try:
        availability = booking.get_available_slots(
            repo, business_id, on_date, slot_minutes=settings.SLOT_MINUTES
        )
    except PersistenceFailure as exc:
        raise http_error(exc)

    window = None
    if availability.window is not None:
        window = {"open": availability.window.open_time, "close": availability.window.close_time}

    return {
        "business_id": business_id,
        "date": on_date,
        "closed": availability.closed,
        "message": availability.message,
        "window": window,
        "slots": [
            {"date": s.date, "time": s.time, "available": s.available}
            for s in availability.slots
        ],
    }
