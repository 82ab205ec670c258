from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date

from src.auth.schemas import UserStatus

class UserStatusUpdate(BaseModel):
    """Approve or suspend an account, optionally assigning a station"""
    status: UserStatus
    assigned_station_id: Optional[str] = Field(None, min_length=1, max_length=50)

class StatusCount(BaseModel):
    status: str
    bookings: int
    seats: int
    amount: int

class BookingSummaryRequest(BaseModel):
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    from_station: Optional[str] = None

class BookingSummary(BaseModel):
    """Booking counts and revenue for the admin dashboard"""
    total_bookings: int
    total_seats: int
    # Revenue counts confirmed bookings only
    confirmed_revenue: int
    pending_amount: int
    cancellation_rate: float
    by_status: List[StatusCount]
    currency: str
