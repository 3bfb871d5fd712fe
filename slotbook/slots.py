# slotbook/slots.py

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Set

from slotbook.errors import SlotConflict
from slotbook.hours import Window, minutes_to_time, time_to_minutes
from slotbook.models import Appointment

SLOT_MINUTES = 30


@dataclass(frozen=True)
class Slot:
    date: date
    time: str
    available: bool


def slot_times(window: Optional[Window], slot_minutes: int = SLOT_MINUTES) -> List[str]:
    if window is None:
        return []

    open_minutes = time_to_minutes(window.open_time)
    close_minutes = time_to_minutes(window.close_time)

    # Last slot must end by close; a trailing partial slot is dropped
    last_start = close_minutes - slot_minutes
    return [minutes_to_time(m) for m in range(open_minutes, last_start + 1, slot_minutes)]


def booked_times(appointments: Iterable, on_date: date) -> Set[str]:
    return {
        a.appointment_time
        for a in appointments
        if a.appointment_date == on_date and a.status.blocks_slot
    }


def enumerate_slots(
    on_date: date,
    window: Optional[Window],
    appointments: Iterable,
    slot_minutes: int = SLOT_MINUTES,
) -> List[Slot]:
    """
    Build the ordered slot list for one business and date.

    A closed day (``window is None``) gives an empty list. Every other slot is
    available unless an active appointment sits on exactly that ``HH:MM``.
    """
    taken = booked_times(appointments, on_date)
    return [
        Slot(date=on_date, time=t, available=t not in taken)
        for t in slot_times(window, slot_minutes)
    ]


def ensure_slot_free(
    existing: Optional[Appointment],
    business_id: str,
    appointment_date: date,
    appointment_time: str,
) -> None:
    if existing is not None and existing.status.blocks_slot:
        raise SlotConflict(business_id, appointment_date, appointment_time)
