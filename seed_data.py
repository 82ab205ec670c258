#!/usr/bin/env python3
"""
Seed Data Script

Creates the station registry and a bootstrap admin account for the Bus
Ticket Booking System.

Usage:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=secret python seed_data.py
"""

import os

from src.database import Base, SessionLocal, engine
from src.models import Station, User
from src.auth.schemas import UserCreate, UserRole
from src.auth.service import UserService

STATIONS = [
    {"station_id": "LHR", "city": "Lahore", "station_name": "Lahore Thokar Niaz Baig"},
    {"station_id": "KHI", "city": "Karachi", "station_name": "Karachi Sohrab Goth"},
    {"station_id": "ISB", "city": "Islamabad", "station_name": "Islamabad Faizabad"},
    {"station_id": "MUL", "city": "Multan", "station_name": "Multan Northern Bypass"},
    {"station_id": "PEW", "city": "Peshawar", "station_name": "Peshawar Haji Camp"},
]

def create_stations(db) -> int:
    """Create any missing stations"""
    print("Creating stations...")
    created = 0
    for data in STATIONS:
        if db.query(Station).filter(Station.station_id == data["station_id"]).first():
            continue
        db.add(Station(**data))
        created += 1
    db.commit()
    return created

def create_admin(db) -> None:
    """Create the bootstrap admin if it does not exist yet"""
    email = os.getenv("ADMIN_EMAIL", "admin@example.com")
    password = os.getenv("ADMIN_PASSWORD", "Admin123!")

    if db.query(User).filter(User.email == email).first():
        print(f"Admin {email} already exists, skipping...")
        return

    UserService.create_user(
        db,
        UserCreate(username="admin", email=email, password=password, role=UserRole.ADMIN),
        allow_admin=True
    )
    print(f"Created admin {email}")

def create_seed_data():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        print("Creating seed data for Bus Ticket Booking System...")
        created = create_stations(db)
        create_admin(db)
        print(f"Created {created} stations")
    except Exception as e:
        print(f"Error creating seed data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
