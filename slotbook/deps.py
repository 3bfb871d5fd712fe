# slotbook/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session

from slotbook.db import get_session
from slotbook.errors import (
    AppointmentNotFound,
    BookingError,
    InvalidStatusTransition,
    OutsideBusinessHours,
    PastDate,
    PersistenceFailure,
    SlotConflict,
)
from slotbook.repository import SQLModelBookingRepository


def get_repository(session: Session = Depends(get_session)) -> SQLModelBookingRepository:
    return SQLModelBookingRepository(session)


def http_error(exc: BookingError) -> HTTPException:
    """Map a booking outcome onto the status code callers should see."""
    if isinstance(exc, SlotConflict):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, InvalidStatusTransition):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, AppointmentNotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (OutsideBusinessHours, PastDate)):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, PersistenceFailure):
        return HTTPException(status_code=500, detail="Internal server error")
    return HTTPException(status_code=400, detail=str(exc))
