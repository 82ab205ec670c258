from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime, date
from enum import Enum

class TravelType(str, Enum):
    """Travel class enumeration"""
    ECONOMY = "economy"
    BUSINESS = "business"

class BookingStatus(str, Enum):
    """Booking status enumeration"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

class DepartureTime(str, Enum):
    """Scheduled departure slots"""
    T0600 = "06:00"
    T0800 = "08:00"
    T1000 = "10:00"
    T1200 = "12:00"
    T1400 = "14:00"
    T1600 = "16:00"
    T1800 = "18:00"
    T2000 = "20:00"
    T2200 = "22:00"

# Booking Request Models
class BookingCreate(BaseModel):
    """Request to book seats on a departure"""
    travel_type: TravelType
    from_station: str = Field(..., min_length=1, max_length=50)
    to_station: str = Field(..., min_length=1, max_length=50)
    travel_date: date
    departure_time: DepartureTime
    seats: List[int]
    on_behalf_of: Optional[int] = Field(None, description="Rider to book for (admins only)")

    @validator('seats', pre=True)
    def accept_seat_objects(cls, v):
        # Seats may arrive as [{"number": 3}, ...] as well as plain numbers
        if isinstance(v, list):
            return [s.get('number') if isinstance(s, dict) else s for s in v]
        return v

class BookingStatusUpdate(BaseModel):
    status: str

# Booking Response Models
class Booking(BaseModel):
    """Persisted booking"""
    id: int
    user_id: int
    username: str
    travel_type: TravelType
    from_station: str
    to_station: str
    travel_date: date
    departure_time: str
    seats: List[int]
    total_amount: int
    status: BookingStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AvailableSeats(BaseModel):
    from_station: str
    to_station: str
    travel_date: date
    departure_time: str
    capacity: int
    available_seats: List[int]
    booked_seats: List[int]

class FareQuote(BaseModel):
    from_station: str
    to_station: str
    travel_type: TravelType
    fare: int
    seat_count: int
    total_amount: int
    currency: str

class StatusTransitions(BaseModel):
    status: BookingStatus
    next_statuses: List[BookingStatus]
