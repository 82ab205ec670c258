"""
Authoritative fare rules.

Fares are a flat price per seat by travel class; the route does not change
the price. Any distance or city-pair table shown by a client is a display
estimate and is never consulted here.
"""

from typing import Iterable, Union
from src.bookings.schemas import TravelType, FareQuote
from src.config import settings
from src.exceptions import InvalidRoute, InvalidTravelType, ValidationError

FARE_PER_SEAT = {
    TravelType.ECONOMY: 4000,
    TravelType.BUSINESS: 5500,
}

def _coerce_travel_type(travel_type: Union[TravelType, str]) -> TravelType:
    try:
        return TravelType(travel_type)
    except ValueError:
        raise InvalidTravelType(f"Unknown travel type: {travel_type}")

def fare_per_seat(travel_type: Union[TravelType, str]) -> int:
    """Price of one seat in the given travel class"""
    return FARE_PER_SEAT[_coerce_travel_type(travel_type)]

def total_amount(travel_type: Union[TravelType, str], seats: Iterable[int]) -> int:
    """Total price for a set of seats"""
    return len(list(seats)) * fare_per_seat(travel_type)

class FareCalculationService:
    """Fare quotes for the public fare endpoint"""

    @staticmethod
    def calculate_fare(
        from_station: str,
        to_station: str,
        travel_type: Union[TravelType, str],
        seat_count: int = 1
    ) -> FareQuote:
        if not from_station or not to_station:
            raise ValidationError("Both from_station and to_station are required")
        if from_station == to_station:
            raise InvalidRoute("Origin and destination must be different stations")
        if seat_count < 1:
            raise ValidationError("seat_count must be at least 1")

        fare = fare_per_seat(travel_type)
        return FareQuote(
            from_station=from_station,
            to_station=to_station,
            travel_type=_coerce_travel_type(travel_type),
            fare=fare,
            seat_count=seat_count,
            total_amount=fare * seat_count,
            currency=settings.CURRENCY
        )
