from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Set, Union
from sqlalchemy.orm import Session

from src.bookings.schemas import DepartureTime
from src.config import settings
from src.models import Booking, SeatClaim

@dataclass(frozen=True)
class RouteKey:
    """The (origin, destination, date, departure) tuple that scopes seat conflicts"""
    from_station: str
    to_station: str
    travel_date: date
    departure_time: str

    @classmethod
    def of(
        cls,
        from_station: str,
        to_station: str,
        travel_date: date,
        departure_time: Union[DepartureTime, str]
    ) -> "RouteKey":
        if isinstance(departure_time, DepartureTime):
            departure_time = departure_time.value
        return cls(from_station, to_station, travel_date, departure_time)

    @classmethod
    def for_booking(cls, booking: Booking) -> "RouteKey":
        return cls(booking.from_station, booking.to_station, booking.travel_date, booking.departure_time)

def seat_universe() -> List[int]:
    """Every seat number on a departure, ascending"""
    return list(range(1, settings.SEAT_CAPACITY + 1))

def is_valid_seat(seat) -> bool:
    return isinstance(seat, int) and not isinstance(seat, bool) and 1 <= seat <= settings.SEAT_CAPACITY

class SeatAvailabilityService:
    """Read and maintain the seats claimed on each departure"""

    def __init__(self, db: Session):
        self.db = db

    def claimed_seats(self, key: RouteKey) -> Set[int]:
        """Seats held by non-cancelled bookings for this route key"""
        rows = self.db.query(SeatClaim.seat_number).filter(
            SeatClaim.from_station == key.from_station,
            SeatClaim.to_station == key.to_station,
            SeatClaim.travel_date == key.travel_date,
            SeatClaim.departure_time == key.departure_time
        ).all()
        return {row[0] for row in rows}

    def available_seats(self, key: RouteKey) -> List[int]:
        claimed = self.claimed_seats(key)
        return [seat for seat in seat_universe() if seat not in claimed]

    def conflicts(self, key: RouteKey, seats: Iterable[int]) -> List[int]:
        """Requested seats that are already claimed, ascending"""
        claimed = self.claimed_seats(key)
        return sorted({seat for seat in seats if seat in claimed})

    def claim(self, booking: Booking) -> None:
        """Attach a claim row for each seat; flushed with the booking's transaction"""
        key = RouteKey.for_booking(booking)
        for seat in booking.seats:
            booking.seat_claims.append(SeatClaim(
                from_station=key.from_station,
                to_station=key.to_station,
                travel_date=key.travel_date,
                departure_time=key.departure_time,
                seat_number=seat
            ))

    def release(self, booking: Booking) -> None:
        """Drop every claim held by the booking"""
        booking.seat_claims.clear()
