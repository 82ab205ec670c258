"""
Domain errors raised by the service layer.

Every error carries the HTTP status it maps to so routers can translate it
into an ``HTTPException`` without knowing the concrete type.
"""

from typing import Iterable, List, Optional
from fastapi import HTTPException, status


class BookingSystemError(Exception):
    """Base class for all domain errors"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def detail(self):
        return self.message

    def to_http(self) -> HTTPException:
        headers = None
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return HTTPException(status_code=self.status_code, detail=self.detail, headers=headers)


class ValidationError(BookingSystemError):
    """Malformed or missing fields"""
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidRoute(ValidationError):
    pass


class InvalidSeatSelection(ValidationError):
    pass


class InvalidStatus(ValidationError):
    pass


class InvalidTravelType(ValidationError):
    pass


class SeatConflict(BookingSystemError):
    """Requested seats are already claimed for the route key"""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, seats: Iterable[int], message: Optional[str] = None):
        self.seats: List[int] = sorted(set(seats))
        if message is None:
            seat_list = ", ".join(str(s) for s in self.seats)
            message = f"Seats {seat_list} are already booked for this time"
        super().__init__(message)

    @property
    def detail(self):
        return {"message": self.message, "seats": self.seats}


class NotFound(BookingSystemError):
    status_code = status.HTTP_404_NOT_FOUND


class Forbidden(BookingSystemError):
    status_code = status.HTTP_403_FORBIDDEN


class Unauthenticated(BookingSystemError):
    status_code = status.HTTP_401_UNAUTHORIZED
