# slotbook/booking.py

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from slotbook.errors import (
    AppointmentNotFound,
    InvalidStatusTransition,
    OutsideBusinessHours,
    PastDate,
    SlotConflict,
)
from slotbook.hours import Window, local_today, resolve_window
from slotbook.models import Appointment, WeeklyHour
from slotbook.repository import BookingRepository
from slotbook.schemas import AppointmentCreate, AppointmentStatus, WeeklyHourIn
from slotbook.slots import SLOT_MINUTES, Slot, ensure_slot_free, enumerate_slots, slot_times

logger = logging.getLogger(__name__)

CLOSED_MESSAGE = "Business is closed on this day"


@dataclass(frozen=True)
class Availability:
    business_id: str
    date: date
    window: Optional[Window]
    slots: List[Slot]

    @property
    def closed(self) -> bool:
        return self.window is None

    @property
    def message(self) -> Optional[str]:
        return CLOSED_MESSAGE if self.closed else None


def get_available_slots(
    repo: BookingRepository,
    business_id: str,
    on_date: date,
    slot_minutes: int = SLOT_MINUTES,
) -> Availability:
    # 1) Which window applies to this weekday?
    window = resolve_window(on_date, repo.list_weekly_hours(business_id))
    if window is None:
        return Availability(business_id=business_id, date=on_date, window=None, slots=[])

    # 2) Mark slots held by pending/confirmed appointments
    appointments = repo.list_active_appointments(business_id, on_date)
    slots = enumerate_slots(on_date, window, appointments, slot_minutes)

    return Availability(business_id=business_id, date=on_date, window=window, slots=slots)


def create_appointment(
    repo: BookingRepository,
    business_id: str,
    payload: AppointmentCreate,
    *,
    today: Optional[date] = None,
    slot_minutes: int = SLOT_MINUTES,
    enforce_business_hours: bool = True,
    allow_past_bookings: bool = False,
) -> Appointment:
    appt_date = payload.appointment_date
    appt_time = payload.appointment_time

    # 1) Prevent booking in the past (local calendar date)
    if not allow_past_bookings and appt_date < (today or local_today()):
        raise PastDate(appt_date)

    # 2) The time must be one of the day's slots
    if enforce_business_hours:
        window = resolve_window(appt_date, repo.list_weekly_hours(business_id))
        if appt_time not in slot_times(window, slot_minutes):
            raise OutsideBusinessHours(appt_date, appt_time)

    # 3) Friendly pre-check; the unique index is what actually guarantees it
    try:
        existing = repo.find_active_appointment(business_id, appt_date, appt_time)
        ensure_slot_free(existing, business_id, appt_date, appt_time)
    except SlotConflict:
        logger.info("Slot %s %s for business %s already taken", appt_date, appt_time, business_id)
        raise

    # 4) Insert as pending
    appointment = Appointment(
        business_id=business_id,
        service_id=payload.service_id,
        client_id=payload.client_id,
        appointment_date=appt_date,
        appointment_time=appt_time,
        status=AppointmentStatus.pending,
        notes=payload.notes,
    )
    try:
        created = repo.insert_appointment(appointment)
    except SlotConflict:
        logger.warning(
            "Concurrent booking for %s %s at business %s rejected by storage",
            appt_date, appt_time, business_id,
        )
        raise

    logger.info(
        "Created appointment %s for business %s at %s %s",
        created.id, business_id, appt_date, appt_time,
    )
    return created


def get_business_appointment(
    repo: BookingRepository, business_id: str, appointment_id: int
) -> Appointment:
    appointment = repo.get_appointment(appointment_id)
    if appointment is None or appointment.business_id != business_id:
        raise AppointmentNotFound(appointment_id)
    return appointment


def update_appointment_status(
    repo: BookingRepository,
    business_id: str,
    appointment_id: int,
    status: AppointmentStatus,
) -> Appointment:
    appointment = get_business_appointment(repo, business_id, appointment_id)

    current = AppointmentStatus(appointment.status)
    if not current.can_transition_to(status):
        raise InvalidStatusTransition(current.value, status.value)

    appointment.status = status
    updated = repo.save_appointment(appointment)
    logger.info("Appointment %s: %s -> %s", appointment_id, current.value, status.value)
    return updated


def cancel_appointment(repo: BookingRepository, business_id: str, appointment_id: int) -> Appointment:
    return update_appointment_status(repo, business_id, appointment_id, AppointmentStatus.cancelled)


def list_appointments(
    repo: BookingRepository,
    business_id: str,
    on_date: Optional[date] = None,
    status: Optional[AppointmentStatus] = None,
    client_id: Optional[str] = None,
) -> List[Appointment]:
    return repo.list_appointments(business_id, on_date=on_date, status=status, client_id=client_id)


def replace_weekly_hours(
    repo: BookingRepository, business_id: str, hours: Iterable[WeeklyHourIn]
) -> List[WeeklyHour]:
    """Overwrite the whole week; only active days are stored."""
    rows = [
        WeeklyHour(
            business_id=business_id,
            day_of_week=h.day_of_week,
            open_time=h.open_time,
            close_time=h.close_time,
            is_active=True,
        )
        for h in hours
        if h.is_active
    ]
    stored = repo.replace_weekly_hours(business_id, rows)
    logger.info("Business %s hours replaced (%d active days)", business_id, len(stored))
    return stored
