from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from src.database import get_db
from src.auth.dependencies import get_current_user, require_staff
from src.bookings.schemas import (
    Booking, BookingCreate, BookingStatusUpdate, BookingStatus, AvailableSeats,
    FareQuote, StatusTransitions, TravelType, DepartureTime
)
from src.bookings.booking_service import BookingService
from src.bookings.status_service import BookingStatusService, legal_transitions
from src.bookings.availability_service import SeatAvailabilityService, RouteKey
from src.bookings.fare_service import FareCalculationService
from src.config import settings
from src.exceptions import BookingSystemError, InvalidRoute
from src.models import User

router = APIRouter()

# Public read endpoints
@router.get("/seats/available", response_model=AvailableSeats)
def get_available_seats(
    from_station: str = Query(..., min_length=1, description="Origin station ID"),
    to_station: str = Query(..., min_length=1, description="Destination station ID"),
    travel_date: date = Query(..., description="Date of travel"),
    departure_time: DepartureTime = Query(..., description="Departure slot"),
    db: Session = Depends(get_db)
):
    """Seats still free on a departure"""
    if from_station == to_station:
        raise InvalidRoute("Origin and destination must be different stations").to_http()

    availability = SeatAvailabilityService(db)
    key = RouteKey.of(from_station, to_station, travel_date, departure_time)
    return AvailableSeats(
        from_station=key.from_station,
        to_station=key.to_station,
        travel_date=key.travel_date,
        departure_time=key.departure_time,
        capacity=settings.SEAT_CAPACITY,
        available_seats=availability.available_seats(key),
        booked_seats=sorted(availability.claimed_seats(key))
    )

@router.get("/fare/calculate", response_model=FareQuote)
def calculate_fare(
    from_station: str = Query(..., min_length=1, description="Origin station ID"),
    to_station: str = Query(..., min_length=1, description="Destination station ID"),
    travel_type: TravelType = Query(..., description="Travel class"),
    seat_count: int = Query(1, ge=1, le=40, description="Number of seats to price"),
):
    """Quote the fare for a route and travel class"""
    try:
        return FareCalculationService.calculate_fare(from_station, to_station, travel_type, seat_count)
    except BookingSystemError as e:
        raise e.to_http()

@router.get("/statuses", response_model=List[StatusTransitions])
def get_status_lifecycle():
    """Status changes offered to staff for each booking status"""
    return [
        StatusTransitions(status=s, next_statuses=legal_transitions(s))
        for s in BookingStatus
    ]

# Booking Management Endpoints
@router.post("/", response_model=Booking, status_code=status.HTTP_201_CREATED)
def create_booking(
    request: BookingCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Book seats on a departure"""
    booking_service = BookingService(db)
    try:
        return booking_service.create_booking(current_user, request)
    except BookingSystemError as e:
        raise e.to_http()

@router.get("/my", response_model=List[Booking])
def get_my_bookings(
    booking_status: Optional[str] = Query(None, alias="status", description="Filter by booking status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100, description="Maximum results"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Bookings made by the current user"""
    booking_service = BookingService(db)
    try:
        return booking_service.list_user_bookings(current_user, status=booking_status, skip=skip, limit=limit)
    except BookingSystemError as e:
        raise e.to_http()

@router.get("/", response_model=List[Booking])
def get_all_bookings(
    from_station: Optional[str] = Query(None, description="Filter by origin station ID"),
    booking_status: Optional[str] = Query(None, alias="status", description="Filter by booking status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500, description="Maximum results"),
    current_user: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """All bookings (admin) or the bookings leaving a station master's station"""
    booking_service = BookingService(db)
    try:
        return booking_service.list_bookings(
            current_user, from_station=from_station, status=booking_status, skip=skip, limit=limit
        )
    except BookingSystemError as e:
        raise e.to_http()

@router.get("/{booking_id}", response_model=Booking)
def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get booking details by ID"""
    booking_service = BookingService(db)
    try:
        return booking_service.get_booking(current_user, booking_id)
    except BookingSystemError as e:
        raise e.to_http()

@router.put("/{booking_id}/status", response_model=Booking)
def update_booking_status(
    booking_id: int,
    update: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Set a booking's status (admin or the origin station's master)"""
    status_service = BookingStatusService(db)
    try:
        return status_service.set_status(booking_id, current_user, update.status)
    except BookingSystemError as e:
        raise e.to_http()

@router.delete("/{booking_id}")
def delete_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove one of your own bookings"""
    booking_service = BookingService(db)
    try:
        booking_service.delete_booking(current_user, booking_id)
    except BookingSystemError as e:
        raise e.to_http()
    return {"message": "Booking removed", "booking_id": booking_id}
