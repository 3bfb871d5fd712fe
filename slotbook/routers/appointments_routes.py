# slotbook/routers/appointments_routes.py

from datetime import date
from typing import Optional, List

from fastapi import APIRouter, Depends

from slotbook import booking
from slotbook.config import Settings, get_settings
from slotbook.deps import get_repository, http_error
from slotbook.errors import BookingError
from slotbook.repository import SQLModelBookingRepository
from slotbook.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
    AppointmentStatusUpdate,
)

router = APIRouter(
    prefix="/businesses/{business_id}/appointments",
    tags=["appointments"],
)


@router.post("", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    business_id: str,
    appt: AppointmentCreate,
    repo: SQLModelBookingRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    try:
        return booking.create_appointment(
            repo,
            business_id,
            appt,
            slot_minutes=settings.SLOT_MINUTES,
            enforce_business_hours=settings.ENFORCE_BUSINESS_HOURS,
            allow_past_bookings=settings.ALLOW_PAST_BOOKINGS,
        )
    except BookingError as exc:
        raise http_error(exc)


@router.get("", response_model=List[AppointmentPublic])
def list_appointments(
    business_id: str,
    on_date: Optional[date] = None,
    status: Optional[AppointmentStatus] = None,
    client_id: Optional[str] = None,
    repo: SQLModelBookingRepository = Depends(get_repository),
):
    try:
        return booking.list_appointments(
            repo, business_id, on_date=on_date, status=status, client_id=client_id
        )
    except BookingError as exc:
        raise http_error(exc)


@router.patch("/{appointment_id}", response_model=AppointmentPublic)
def update_appointment_status(
    business_id: str,
    appointment_id: int,
    update: AppointmentStatusUpdate,
    repo: SQLModelBookingRepository = Depends(get_repository),
):
    try:
        return booking.update_appointment_status(repo, business_id, appointment_id, update.status)
    except BookingError as exc:
        raise http_error(exc)


@router.delete("/{appointment_id}", response_model=AppointmentPublic)
def cancel_appointment(
    business_id: str,
    appointment_id: int,
    repo: SQLModelBookingRepository = Depends(get_repository),
):
    try:
        return booking.cancel_appointment(repo, business_id, appointment_id)
    except BookingError as exc:
        raise http_error(exc)
