from sqlalchemy import Column, Integer, BigInteger, String, DateTime, Date, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from src.database import Base

# SQLite only autoincrements INTEGER primary keys
BigIntegerPK = BigInteger().with_variant(Integer, "sqlite")

# ================================
# Users
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    username = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="rider", index=True)
    status = Column(String(50), nullable=False, default="active")
    assigned_station_id = Column(String(50))
    assigned_station_name = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    bookings = relationship("Booking", back_populates="user")

# ================================
# Stations
# ================================
class Station(Base):
    __tablename__ = "stations"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    station_id = Column(String(50), unique=True, nullable=False, index=True)
    city = Column(String(255), nullable=False, index=True)
    station_name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

# ================================
# Bookings
# ================================
class Booking(Base):
    __tablename__ = "bookings"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    user_id = Column(BigInteger, ForeignKey("users.id"), nullable=False, index=True)
    username = Column(String(255), nullable=False)
    travel_type = Column(String(50), nullable=False)
    # Stations are referenced by code so deleting a station leaves history intact
    from_station = Column(String(50), nullable=False, index=True)
    to_station = Column(String(50), nullable=False, index=True)
    travel_date = Column(Date, nullable=False, index=True)
    departure_time = Column(String(5), nullable=False)
    seats = Column(JSON, nullable=False)
    total_amount = Column(Integer, nullable=False)
    status = Column(String(50), nullable=False, default="pending", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="bookings")
    seat_claims = relationship("SeatClaim", back_populates="booking", cascade="all, delete-orphan")

class SeatClaim(Base):
    """One row per seat held by a booking that is not cancelled"""
    __tablename__ = "seat_claims"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    booking_id = Column(BigInteger, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    from_station = Column(String(50), nullable=False)
    to_station = Column(String(50), nullable=False)
    travel_date = Column(Date, nullable=False)
    departure_time = Column(String(5), nullable=False)
    seat_number = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    booking = relationship("Booking", back_populates="seat_claims")

    __table_args__ = (
        UniqueConstraint(
            "from_station", "to_station", "travel_date", "departure_time", "seat_number",
            name="uq_seat_claim_route_key_seat"
        ),
    )
