"""
Booking Module

Seat booking for scheduled bus departures:

- fare_service.py: flat per-seat fares by travel class
- availability_service.py: seats claimed and free on each departure
- booking_service.py: admission of seat requests, lookup and removal
- status_service.py: staff status changes (pending, confirmed, cancelled)
- router.py: FastAPI endpoints
- schemas.py: Pydantic models

Each non-cancelled booking holds one claim row per seat under a unique
constraint on (origin, destination, date, departure, seat), so two bookings
can never hold the same seat on the same departure even when admitted
concurrently.
"""

from .router import router
from .booking_service import BookingService
from .status_service import BookingStatusService
from .availability_service import SeatAvailabilityService, RouteKey
from .fare_service import FareCalculationService, fare_per_seat
from .schemas import (
    Booking, BookingCreate, BookingStatus, BookingStatusUpdate, TravelType,
    DepartureTime, AvailableSeats, FareQuote
)

__all__ = [
    "router",
    "BookingService",
    "BookingStatusService",
    "SeatAvailabilityService",
    "RouteKey",
    "FareCalculationService",
    "fare_per_seat",
    "Booking",
    "BookingCreate",
    "BookingStatus",
    "BookingStatusUpdate",
    "TravelType",
    "DepartureTime",
    "AvailableSeats",
    "FareQuote",
]
