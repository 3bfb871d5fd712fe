# slotbook/repository.py

import logging
from datetime import date
from typing import List, Optional, Protocol, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, delete, select

from slotbook.errors import PersistenceFailure, SlotConflict
from slotbook.models import Appointment, WeeklyHour, utcnow
from slotbook.schemas import ACTIVE_STATUSES, AppointmentStatus

logger = logging.getLogger(__name__)


class BookingRepository(Protocol):
    """Everything the booking core reads from or writes to storage."""

    def list_weekly_hours(self, business_id: str) -> List[WeeklyHour]: ...

    def replace_weekly_hours(self, business_id: str, rows: Sequence[WeeklyHour]) -> List[WeeklyHour]: ...

    def list_active_appointments(self, business_id: str, on_date: date) -> List[Appointment]: ...

    def find_active_appointment(
        self, business_id: str, on_date: date, at_time: str
    ) -> Optional[Appointment]: ...

    def insert_appointment(self, appointment: Appointment) -> Appointment: ...

    def get_appointment(self, appointment_id: int) -> Optional[Appointment]: ...

    def save_appointment(self, appointment: Appointment) -> Appointment: ...

    def list_appointments(
        self,
        business_id: str,
        on_date: Optional[date] = None,
        status: Optional[AppointmentStatus] = None,
        client_id: Optional[str] = None,
    ) -> List[Appointment]: ...


class SQLModelBookingRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_weekly_hours(self, business_id: str) -> List[WeeklyHour]:
        try:
            return list(self.session.exec(
                select(WeeklyHour)
                .where(WeeklyHour.business_id == business_id)
                .order_by(WeeklyHour.day_of_week)
            ).all())
        except SQLAlchemyError as exc:
            raise self._failure("fetch business hours", exc) from exc

    def replace_weekly_hours(self, business_id: str, rows: Sequence[WeeklyHour]) -> List[WeeklyHour]:
        # Full-week overwrite: drop every row, reinsert the new set
        try:
            self.session.exec(delete(WeeklyHour).where(WeeklyHour.business_id == business_id))
            for row in rows:
                self.session.add(row)
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._failure("update business hours", exc) from exc
        return self.list_weekly_hours(business_id)

    def list_active_appointments(self, business_id: str, on_date: date) -> List[Appointment]:
        try:
            return list(self.session.exec(
                select(Appointment)
                .where(Appointment.business_id == business_id)
                .where(Appointment.appointment_date == on_date)
                .where(col(Appointment.status).in_(tuple(ACTIVE_STATUSES)))
                .order_by(Appointment.appointment_time)
            ).all())
        except SQLAlchemyError as exc:
            raise self._failure("fetch appointments", exc) from exc

    def find_active_appointment(
        self, business_id: str, on_date: date, at_time: str
    ) -> Optional[Appointment]:
        try:
            return self.session.exec(
                select(Appointment)
                .where(Appointment.business_id == business_id)
                .where(Appointment.appointment_date == on_date)
                .where(Appointment.appointment_time == at_time)
                .where(col(Appointment.status).in_(tuple(ACTIVE_STATUSES)))
            ).first()
        except SQLAlchemyError as exc:
            raise self._failure("check availability", exc) from exc

    def insert_appointment(self, appointment: Appointment) -> Appointment:
        slot_key = (appointment.business_id, appointment.appointment_date, appointment.appointment_time)
        self.session.add(appointment)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost the race: another booking took the slot after our pre-check
            self.session.rollback()
            raise SlotConflict(*slot_key)
        except SQLAlchemyError as exc:
            raise self._failure("create appointment", exc) from exc

        self.session.refresh(appointment)  # fills appointment.id
        return appointment

    def get_appointment(self, appointment_id: int) -> Optional[Appointment]:
        try:
            return self.session.get(Appointment, appointment_id)
        except SQLAlchemyError as exc:
            raise self._failure("fetch appointment", exc) from exc

    def save_appointment(self, appointment: Appointment) -> Appointment:
        appointment.updated_at = utcnow()
        self.session.add(appointment)
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._failure("update appointment", exc) from exc
        self.session.refresh(appointment)
        return appointment

    def list_appointments(
        self,
        business_id: str,
        on_date: Optional[date] = None,
        status: Optional[AppointmentStatus] = None,
        client_id: Optional[str] = None,
    ) -> List[Appointment]:
        stmt = select(Appointment).where(Appointment.business_id == business_id)

        if on_date is not None:
            stmt = stmt.where(Appointment.appointment_date == on_date)
        if status is not None:
            stmt = stmt.where(Appointment.status == status)
        if client_id is not None:
            stmt = stmt.where(Appointment.client_id == client_id)

        stmt = stmt.order_by(Appointment.appointment_date, Appointment.appointment_time)

        try:
            return list(self.session.exec(stmt).all())
        except SQLAlchemyError as exc:
            raise self._failure("fetch appointments", exc) from exc

    def _failure(self, action: str, exc: Exception) -> PersistenceFailure:
        self.session.rollback()
        logger.error("Failed to %s: %s", action, exc, exc_info=True)
        return PersistenceFailure(f"Failed to {action}")
