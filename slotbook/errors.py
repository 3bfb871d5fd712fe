# slotbook/errors.py

from datetime import date


class BookingError(Exception):
    """Base class for outcomes the booking core reports to its callers."""


class SlotConflict(BookingError):
    def __init__(self, business_id: str, appointment_date: date, appointment_time: str):
        self.business_id = business_id
        self.appointment_date = appointment_date
        self.appointment_time = appointment_time
        super().__init__("Time slot is no longer available")


class OutsideBusinessHours(BookingError):
    def __init__(self, appointment_date: date, appointment_time: str):
        self.appointment_date = appointment_date
        self.appointment_time = appointment_time
        super().__init__(
            f"{appointment_time} on {appointment_date.isoformat()} is not a bookable slot"
        )


class PastDate(BookingError):
    def __init__(self, appointment_date: date):
        self.appointment_date = appointment_date
        super().__init__("Cannot book an appointment in the past")


class AppointmentNotFound(BookingError):
    def __init__(self, appointment_id: int):
        self.appointment_id = appointment_id
        super().__init__("Appointment not found")


class InvalidStatusTransition(BookingError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from '{current}' to '{requested}'")


class PersistenceFailure(BookingError):
    """The storage layer failed for a reason unrelated to a slot conflict."""
