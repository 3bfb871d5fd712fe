# slotbook/models.py

from typing import Optional
from datetime import datetime, date as Date, timezone

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import SQLModel, Field

from slotbook.schemas import AppointmentStatus

# Keep in sync with schemas.ACTIVE_STATUSES
ACTIVE_SLOT_PREDICATE = "status IN ('pending', 'confirmed')"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeeklyHour(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("business_id", "day_of_week", name="uq_business_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: str = Field(index=True)
    day_of_week: int  # 0=Sun, 1=Mon ... 6=Sat
    open_time: str  # HH:MM
    close_time: str  # HH:MM
    is_active: bool = True


class Appointment(SQLModel, table=True):
    # At most one pending/confirmed appointment per business + date + time.
    # Completed and cancelled rows fall outside the index and free the slot.
    __table_args__ = (
        Index(
            "uq_appointment_active_slot",
            "business_id",
            "appointment_date",
            "appointment_time",
            unique=True,
            sqlite_where=text(ACTIVE_SLOT_PREDICATE),
            postgresql_where=text(ACTIVE_SLOT_PREDICATE),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: str = Field(index=True)
    service_id: str
    client_id: str = Field(index=True)
    appointment_date: Date = Field(index=True)
    appointment_time: str  # HH:MM
    status: AppointmentStatus = AppointmentStatus.pending
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
