# slotbook/hours.py

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_HH_MM = re.compile(r"^(\d{1,2}):(\d{2})$")
_LOOSE = re.compile(r"^(\d{1,2}):?(\d{2})?$")


@dataclass(frozen=True)
class Window:
    open_time: str
    close_time: str


def day_of_week(on_date: date) -> int:
    # date.weekday() is 0=Monday; shift so Sunday is 0
    return (on_date.weekday() + 1) % 7


def parse_date(value: str) -> date:
    """Build a date from a ``YYYY-MM-DD`` string without any timezone step."""
    year, month, day = (int(part) for part in value.split("-"))
    return date(year, month, day)


def local_today() -> date:
    return date.today()


def time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def normalize_time(value: Optional[str]) -> Optional[str]:
    """
    Normalize a user-entered time to zero-padded ``HH:MM``.

    Accepts ``9:00``, ``09:00``, ``0900`` and ``9``. Returns None when the
    value cannot be read or is out of range.
    """
    if not value:
        return None
    clean = value.strip()

    match = _HH_MM.match(clean)
    if match is None:
        if ":" not in clean and len(clean) == 4:
            clean = f"{clean[:2]}:{clean[2:]}"
        match = _LOOSE.match(clean)
        if match is None:
            return None

    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return f"{hours:02d}:{minutes:02d}"


def resolve_window(on_date: date, weekly_hours: Iterable) -> Optional[Window]:
    """
    Return the open window for ``on_date``, or None when the business is closed.

    ``weekly_hours`` is the business's full set of rows (at most one per
    weekday); anything with ``day_of_week``, ``open_time``, ``close_time``
    and ``is_active`` attributes will do.
    """
    weekday = day_of_week(on_date)
    for row in weekly_hours:
        if row.day_of_week != weekday:
            continue
        if not row.is_active:
            return None
        return Window(open_time=row.open_time, close_time=row.close_time)
    return None


def format_time_12h(value: str) -> str:
    hours, minutes = value.split(":")[:2]
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minutes} {suffix}"


def format_weekly_hours(weekly_hours: Iterable) -> List[dict]:
    """One display row per weekday, Sunday first."""
    by_day = {row.day_of_week: row for row in weekly_hours}

    formatted = []
    for index, name in enumerate(DAY_NAMES):
        row = by_day.get(index)
        if row is None or not row.is_active:
            formatted.append({"day": name, "status": "Closed", "open_time": None, "close_time": None})
            continue
        formatted.append({
            "day": name,
            "status": f"{format_time_12h(row.open_time)} - {format_time_12h(row.close_time)}",
            "open_time": row.open_time,
            "close_time": row.close_time,
        })
    return formatted
