import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from src.main import app
from src.database import Base, SessionLocal, engine
from src.models import Station, User
from src.auth.utils import create_access_token, get_password_hash

PASSWORD = "secret123"
_PASSWORD_HASH = get_password_hash(PASSWORD)

STATIONS = [
    ("LHR", "Lahore", "Lahore Thokar Niaz Baig"),
    ("KHI", "Karachi", "Karachi Sohrab Goth"),
    ("ISB", "Islamabad", "Islamabad Faizabad"),
    ("MUL", "Multan", "Multan Northern Bypass"),
]


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def stations(db):
    for station_id, city, name in STATIONS:
        db.add(Station(station_id=station_id, city=city, station_name=name))
    db.commit()
    return [s[0] for s in STATIONS]


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role="rider", status=None, station=None, username=None):
        counter["n"] += 1
        if status is None:
            status = "pending" if role == "station_master" else "active"
        user = User(
            username=username or f"{role}{counter['n']}",
            email=f"{role}{counter['n']}@example.com",
            password=_PASSWORD_HASH,
            role=role,
            status=status,
            assigned_station_id=station,
            assigned_station_name=f"{station} Terminal" if station else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def rider(make_user):
    return make_user("rider", username="alice")


@pytest.fixture
def other_rider(make_user):
    return make_user("rider", username="bob")


@pytest.fixture
def admin(make_user):
    return make_user("admin", username="root")


def auth_headers(user):
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


def booking_payload(**overrides):
    payload = {
        "travel_type": "economy",
        "from_station": "LHR",
        "to_station": "KHI",
        "travel_date": "2024-06-01",
        "departure_time": "08:00",
        "seats": [1, 2],
    }
    payload.update(overrides)
    return payload
