# slotbook/schemas.py

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from slotbook.hours import normalize_time


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"

    @property
    def blocks_slot(self) -> bool:
        return self in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return not STATUS_TRANSITIONS[self]

    def can_transition_to(self, other: "AppointmentStatus") -> bool:
        return other in STATUS_TRANSITIONS[self]


# Statuses that occupy a slot
ACTIVE_STATUSES = frozenset({AppointmentStatus.pending, AppointmentStatus.confirmed})

STATUS_TRANSITIONS = {
    AppointmentStatus.pending: frozenset({AppointmentStatus.confirmed, AppointmentStatus.cancelled}),
    AppointmentStatus.confirmed: frozenset({AppointmentStatus.completed, AppointmentStatus.cancelled}),
    AppointmentStatus.completed: frozenset(),
    AppointmentStatus.cancelled: frozenset(),
}


def _normalized(value: str, field: str) -> str:
    result = normalize_time(value)
    if result is None:
        raise ValueError(f"{field} must be a HH:MM time (e.g. 09:00, 17:30)")
    return result


class WeeklyHourIn(BaseModel):
    day_of_week: int = Field(ge=0, le=6)  # 0=Sun, 1=Mon ... 6=Sat
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    is_active: bool

    @model_validator(mode="after")
    def check_times(self):
        if not self.is_active:
            # Closed days keep placeholder times; they are never stored
            self.open_time = self.open_time or "09:00"
            self.close_time = self.close_time or "17:00"
            return self

        if not self.open_time or not self.close_time:
            raise ValueError("Open and close times are required for active days")
        self.open_time = _normalized(self.open_time, "open_time")
        self.close_time = _normalized(self.close_time, "close_time")
        if self.open_time >= self.close_time:
            raise ValueError("Close time must be after open time")
        return self


class WeeklyHoursUpdate(BaseModel):
    hours: List[WeeklyHourIn]


class WeeklyHourPublic(BaseModel):
    day_of_week: int
    open_time: str
    close_time: str
    is_active: bool


class FormattedDayHours(BaseModel):
    day: str
    status: str
    open_time: Optional[str]
    close_time: Optional[str]


class WindowPublic(BaseModel):
    open: str
    close: str


class SlotPublic(BaseModel):
    date: date
    time: str
    available: bool


class AvailableSlotsResponse(BaseModel):
    business_id: str
    date: date
    closed: bool
    message: Optional[str] = None
    window: Optional[WindowPublic] = None
    slots: List[SlotPublic]


class AppointmentCreate(BaseModel):
    service_id: str = Field(min_length=1)
    client_id: str = Field(min_length=1)
    appointment_date: date
    appointment_time: str
    notes: Optional[str] = None

    @field_validator("appointment_time")
    @classmethod
    def check_time(cls, value: str) -> str:
        return _normalized(value, "appointment_time")


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentPublic(BaseModel):
    id: int
    business_id: str
    service_id: str
    client_id: str
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
