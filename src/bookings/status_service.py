"""
Booking status changes.

Any status may be set from any other; cancellation is reversible. The
lifecycle the staff screens offer is kept in ``LIFECYCLE`` for display only.
"""

import logging
from typing import Dict, List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from src.bookings.schemas import BookingStatus
from src.bookings.availability_service import SeatAvailabilityService, RouteKey
from src.bookings.booking_service import BookingService
from src.exceptions import Forbidden, InvalidStatus, NotFound, SeatConflict
from src.models import Booking, User

logger = logging.getLogger(__name__)

LIFECYCLE: Dict[BookingStatus, List[BookingStatus]] = {
    BookingStatus.PENDING: [BookingStatus.CONFIRMED, BookingStatus.CANCELLED],
    BookingStatus.CONFIRMED: [BookingStatus.CANCELLED],
    BookingStatus.CANCELLED: [BookingStatus.CONFIRMED],
}

def legal_transitions(status: BookingStatus) -> List[BookingStatus]:
    """Next statuses offered from ``status``"""
    return list(LIFECYCLE[BookingStatus(status)])

class BookingStatusService:
    def __init__(self, db: Session):
        self.db = db
        self.availability = SeatAvailabilityService(db)
        self.bookings = BookingService(db)

    def set_status(self, booking_id: int, actor: User, new_status: str) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if booking is None:
            raise NotFound("Booking not found")

        if not self.bookings.can_manage(actor, booking):
            raise Forbidden("Not allowed to change the status of this booking")

        try:
            target = BookingStatus(new_status)
        except ValueError:
            raise InvalidStatus(f"Invalid status: {new_status}")

        current = BookingStatus(booking.status)
        if current == target:
            return booking

        key = RouteKey.for_booking(booking)
        if target == BookingStatus.CANCELLED:
            self.availability.release(booking)
        elif current == BookingStatus.CANCELLED:
            # Leaving cancelled takes the seats back, which may have been resold
            conflicting = self.availability.conflicts(key, booking.seats)
            if conflicting:
                raise SeatConflict(
                    conflicting,
                    f"Cannot restore booking {booking.id}: seats {', '.join(str(s) for s in conflicting)} were booked again"
                )
            self.availability.claim(booking)

        booking.status = target.value
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise SeatConflict(self.availability.conflicts(key, booking.seats) or booking.seats)

        self.db.refresh(booking)
        logger.info(
            "Booking %s status %s -> %s by user %s (%s)",
            booking.id, current.value, target.value, actor.id, actor.role
        )
        return booking
