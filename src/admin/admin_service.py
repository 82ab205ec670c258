import logging
from collections import defaultdict
from typing import Dict, List
from sqlalchemy.orm import Session

from src.admin.schemas import (
    UserStatusUpdate, BookingSummaryRequest, BookingSummary, StatusCount
)
from src.auth.schemas import UserRole, UserStatus
from src.auth.service import UserService
from src.bookings.schemas import BookingStatus
from src.config import settings
from src.exceptions import NotFound, ValidationError
from src.models import Booking, User
from src.stations.service import StationService

logger = logging.getLogger(__name__)

class AdminManagementService:
    """Service for administrative management operations"""

    def __init__(self, db: Session):
        self.db = db

    # User Management
    def update_user_status(self, admin: User, user_id: int, update: UserStatusUpdate) -> User:
        """Activate or suspend a user; station masters get their station on activation"""

        user = UserService.get_user_by_id(self.db, user_id)
        if user is None:
            raise NotFound("User not found")

        is_station_master = user.role == UserRole.STATION_MASTER.value

        if update.assigned_station_id:
            if not is_station_master:
                raise ValidationError("Only station masters can be assigned a station")
            station = StationService.require_station(self.db, update.assigned_station_id)
            user.assigned_station_id = station.station_id
            user.assigned_station_name = station.station_name

        if (
            is_station_master
            and update.status == UserStatus.ACTIVE
            and not user.assigned_station_id
        ):
            raise ValidationError("A station must be assigned before activating a station master")

        user.status = update.status.value
        self.db.commit()
        self.db.refresh(user)

        logger.info(
            "User %s set to %s by admin %s (station %s)",
            user.id, user.status, admin.id, user.assigned_station_id
        )
        return user

    def list_pending_station_masters(self) -> List[User]:
        return UserService.list_users(
            self.db, role=UserRole.STATION_MASTER.value, status=UserStatus.PENDING.value
        )

    # Analytics
    def get_booking_summary(self, request: BookingSummaryRequest) -> BookingSummary:
        """Booking counts and amounts grouped by status"""

        query = self.db.query(Booking)
        if request.date_from:
            query = query.filter(Booking.travel_date >= request.date_from)
        if request.date_to:
            query = query.filter(Booking.travel_date <= request.date_to)
        if request.from_station:
            query = query.filter(Booking.from_station == request.from_station)
        bookings = query.all()

        counts: Dict[str, int] = defaultdict(int)
        seats: Dict[str, int] = defaultdict(int)
        amounts: Dict[str, int] = defaultdict(int)
        for booking in bookings:
            counts[booking.status] += 1
            seats[booking.status] += len(booking.seats)
            amounts[booking.status] += booking.total_amount

        by_status = [
            StatusCount(
                status=s.value,
                bookings=counts[s.value],
                seats=seats[s.value],
                amount=amounts[s.value]
            )
            for s in BookingStatus
        ]

        total = len(bookings)
        cancelled = counts[BookingStatus.CANCELLED.value]
        cancellation_rate = round(cancelled / total * 100, 2) if total else 0.0

        return BookingSummary(
            total_bookings=total,
            total_seats=sum(seats.values()),
            confirmed_revenue=amounts[BookingStatus.CONFIRMED.value],
            pending_amount=amounts[BookingStatus.PENDING.value],
            cancellation_rate=cancellation_rate,
            by_status=by_status,
            currency=settings.CURRENCY
        )
