import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from src.auth.service import UserService
from src.bookings.schemas import BookingCreate, BookingStatus
from src.bookings.availability_service import SeatAvailabilityService, RouteKey, is_valid_seat
from src.bookings.fare_service import total_amount
from src.config import settings
from src.exceptions import (
    Forbidden, InvalidRoute, InvalidSeatSelection, InvalidStatus, NotFound, SeatConflict
)
from src.models import Booking, User
from src.stations.service import StationService

logger = logging.getLogger(__name__)

class BookingService:
    """Admission, lookup and removal of seat bookings"""

    def __init__(self, db: Session):
        self.db = db
        self.availability = SeatAvailabilityService(db)

    def create_booking(self, actor: User, request: BookingCreate) -> Booking:
        """Validate a seat request and persist it, or raise a domain error"""

        # 1. Route must join two different stations
        if request.from_station == request.to_station:
            raise InvalidRoute("Origin and destination must be different stations")

        # 2. Seat selection must be non-empty, unique and inside the coach
        self._validate_seats(request.seats)

        # Both stations must be known to the registry
        StationService.require_station(self.db, request.from_station)
        StationService.require_station(self.db, request.to_station)

        owner = self._resolve_owner(actor, request.on_behalf_of)
        key = RouteKey.of(request.from_station, request.to_station, request.travel_date, request.departure_time)

        # 3. None of the seats may already be held on this departure
        conflicting = self.availability.conflicts(key, request.seats)
        if conflicting:
            logger.info("Seat conflict on %s for seats %s", key, conflicting)
            raise SeatConflict(conflicting)

        # Admins book straight into confirmed
        status = BookingStatus.CONFIRMED if UserService.is_admin(actor) else BookingStatus.PENDING

        seats = sorted(request.seats)
        booking = Booking(
            user_id=owner.id,
            username=owner.username,
            travel_type=request.travel_type.value,
            from_station=key.from_station,
            to_station=key.to_station,
            travel_date=key.travel_date,
            departure_time=key.departure_time,
            seats=seats,
            total_amount=total_amount(request.travel_type, seats),
            status=status.value
        )
        self.availability.claim(booking)

        try:
            self.db.add(booking)
            self.db.commit()
        except IntegrityError:
            # Another admission claimed one of the seats between check and write
            self.db.rollback()
            conflicting = self.availability.conflicts(key, seats) or seats
            logger.warning("Concurrent admission lost the race on %s for seats %s", key, conflicting)
            raise SeatConflict(conflicting)

        self.db.refresh(booking)
        logger.info(
            "Booking %s admitted for user %s on %s seats=%s total=%s status=%s",
            booking.id, owner.id, key, seats, booking.total_amount, booking.status
        )
        return booking

    def _validate_seats(self, seats: List[int]) -> None:
        if not seats:
            raise InvalidSeatSelection("At least one seat must be selected")
        invalid = [seat for seat in seats if not is_valid_seat(seat)]
        if invalid:
            raise InvalidSeatSelection(
                f"Seat numbers must be between 1 and {settings.SEAT_CAPACITY}: {invalid}"
            )
        if len(set(seats)) != len(seats):
            raise InvalidSeatSelection("A seat cannot be selected more than once")

    def _resolve_owner(self, actor: User, on_behalf_of: Optional[int]) -> User:
        if on_behalf_of is None or on_behalf_of == actor.id:
            return actor
        if not UserService.is_admin(actor):
            raise Forbidden("Only admins may book on behalf of another user")
        owner = UserService.get_user_by_id(self.db, on_behalf_of)
        if owner is None:
            raise NotFound(f"User {on_behalf_of} not found")
        return owner

    def can_manage(self, actor: User, booking: Booking) -> bool:
        """Admins manage every booking, station masters those leaving their station"""
        if UserService.is_admin(actor):
            return True
        return (
            UserService.is_approved_station_master(actor)
            and actor.assigned_station_id == booking.from_station
        )

    def get_booking(self, actor: User, booking_id: int) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if booking is None:
            raise NotFound("Booking not found")
        if booking.user_id != actor.id and not self.can_manage(actor, booking):
            raise Forbidden("Not allowed to view this booking")
        return booking

    def list_user_bookings(
        self,
        actor: User,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Booking]:
        """The actor's own bookings, newest first"""
        query = self.db.query(Booking).filter(Booking.user_id == actor.id)
        if status:
            query = query.filter(Booking.status == self._check_status(status))
        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(skip).limit(limit).all()

    def list_bookings(
        self,
        actor: User,
        from_station: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Booking]:
        """All bookings for admins; a station master only sees their own station"""
        if UserService.is_admin(actor):
            station = from_station
        elif UserService.is_approved_station_master(actor):
            if from_station and from_station != actor.assigned_station_id:
                raise Forbidden("Station masters can only view bookings from their assigned station")
            station = actor.assigned_station_id
        else:
            raise Forbidden("Admin or Station Master access only")

        query = self.db.query(Booking)
        if station:
            query = query.filter(Booking.from_station == station)
        if status:
            query = query.filter(Booking.status == self._check_status(status))
        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(skip).limit(limit).all()

    def delete_booking(self, actor: User, booking_id: int) -> None:
        """Remove a booking outright, freeing its seats"""
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if booking is None:
            raise NotFound("Booking not found")
        if booking.user_id != actor.id and not UserService.is_admin(actor):
            raise Forbidden("Only the booking owner can remove this booking")

        self.db.delete(booking)
        self.db.commit()
        logger.info("Booking %s removed by user %s", booking_id, actor.id)

    @staticmethod
    def _check_status(status: str) -> str:
        try:
            return BookingStatus(status).value
        except ValueError:
            raise InvalidStatus(f"Invalid status: {status}")
