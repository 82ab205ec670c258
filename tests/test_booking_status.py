import pytest

from src.bookings.schemas import BookingCreate, BookingStatus
from src.bookings.booking_service import BookingService
from src.bookings.status_service import BookingStatusService, legal_transitions
from src.bookings.availability_service import SeatAvailabilityService
from src.exceptions import Forbidden, InvalidStatus, NotFound, SeatConflict
from src.models import Booking, SeatClaim

from conftest import auth_headers, booking_payload

BOOKINGS = "/api/v1/bookings/"


def _status_url(booking_id):
    return f"{BOOKINGS}{booking_id}/status"


@pytest.fixture
def pending_booking(client, stations, rider):
    response = client.post(BOOKINGS, json=booking_payload(), headers=auth_headers(rider))
    assert response.status_code == 201
    return response.json()


def test_admin_confirms_pending_booking(client, pending_booking, admin):
    response = client.put(
        _status_url(pending_booking["id"]), json={"status": "confirmed"}, headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"


def test_station_master_of_other_station_is_forbidden(client, pending_booking, make_user):
    master = make_user("station_master", status="active", station="ISB")
    response = client.put(
        _status_url(pending_booking["id"]), json={"status": "confirmed"}, headers=auth_headers(master)
    )
    assert response.status_code == 403


def test_station_master_of_origin_station_may_confirm(client, pending_booking, make_user):
    master = make_user("station_master", status="active", station="LHR")
    response = client.put(
        _status_url(pending_booking["id"]), json={"status": "confirmed"}, headers=auth_headers(master)
    )
    assert response.status_code == 200


def test_pending_station_master_cannot_act(client, pending_booking, make_user):
    master = make_user("station_master", status="pending", station="LHR")
    response = client.put(
        _status_url(pending_booking["id"]), json={"status": "confirmed"}, headers=auth_headers(master)
    )
    assert response.status_code == 403


def test_rider_cannot_change_status(client, pending_booking, rider):
    response = client.put(
        _status_url(pending_booking["id"]), json={"status": "confirmed"}, headers=auth_headers(rider)
    )
    assert response.status_code == 403


def test_unknown_status_is_rejected(client, pending_booking, admin):
    response = client.put(
        _status_url(pending_booking["id"]), json={"status": "boarded"}, headers=auth_headers(admin)
    )
    assert response.status_code == 400


def test_missing_booking(client, stations, admin):
    response = client.put(_status_url(424242), json={"status": "confirmed"}, headers=auth_headers(admin))
    assert response.status_code == 404


def test_cancel_releases_seats(client, pending_booking, admin, other_rider):
    client.put(_status_url(pending_booking["id"]), json={"status": "cancelled"}, headers=auth_headers(admin))

    response = client.post(BOOKINGS, json=booking_payload(seats=[2]), headers=auth_headers(other_rider))
    assert response.status_code == 201


def test_cancellation_is_reversible(client, pending_booking, admin):
    url = _status_url(pending_booking["id"])
    client.put(url, json={"status": "cancelled"}, headers=auth_headers(admin))
    response = client.put(url, json={"status": "confirmed"}, headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"

    seats = client.get(
        BOOKINGS + "seats/available",
        params={"from_station": "LHR", "to_station": "KHI", "travel_date": "2024-06-01", "departure_time": "08:00"},
    ).json()
    assert seats["booked_seats"] == [1, 2]


def test_restoring_resold_seats_conflicts(client, pending_booking, admin, other_rider):
    url = _status_url(pending_booking["id"])
    client.put(url, json={"status": "cancelled"}, headers=auth_headers(admin))
    client.post(BOOKINGS, json=booking_payload(seats=[2, 3]), headers=auth_headers(other_rider))

    response = client.put(url, json={"status": "pending"}, headers=auth_headers(admin))
    assert response.status_code == 409
    assert response.json()["detail"]["seats"] == [2]

    booking = client.get(f"{BOOKINGS}{pending_booking['id']}", headers=auth_headers(admin)).json()
    assert booking["status"] == "cancelled"


def test_any_status_may_follow_any_other(db, stations, rider, admin):
    request = BookingCreate(**booking_payload())
    booking = BookingService(db).create_booking(rider, request)
    service = BookingStatusService(db)

    for target in ["confirmed", "pending", "cancelled", "pending", "cancelled", "confirmed"]:
        assert service.set_status(booking.id, admin, target).status == target


def test_service_errors(db, stations, rider, admin):
    booking = BookingService(db).create_booking(rider, BookingCreate(**booking_payload()))
    service = BookingStatusService(db)

    with pytest.raises(NotFound):
        service.set_status(booking.id + 1000, admin, "confirmed")
    with pytest.raises(Forbidden):
        service.set_status(booking.id, rider, "confirmed")
    with pytest.raises(InvalidStatus):
        service.set_status(booking.id, admin, "done")


def test_direct_double_admission_raises_conflict(db, stations, rider, other_rider):
    BookingService(db).create_booking(rider, BookingCreate(**booking_payload(seats=[5])))
    with pytest.raises(SeatConflict) as exc:
        BookingService(db).create_booking(other_rider, BookingCreate(**booking_payload(seats=[4, 5])))
    assert exc.value.seats == [5]


def test_lifecycle_listing(client):
    assert legal_transitions(BookingStatus.CANCELLED) == [BookingStatus.CONFIRMED]
    response = client.get(BOOKINGS + "statuses")
    assert response.status_code == 200
    by_status = {row["status"]: row["next_statuses"] for row in response.json()}
    assert by_status["pending"] == ["confirmed", "cancelled"]


def _stale_first_conflict_check(monkeypatch):
    # The first conflict check sees no claims, as if another admission committed right after it
    original = SeatAvailabilityService.conflicts
    calls = {"n": 0}

    def conflicts(self, key, seats):
        calls["n"] += 1
        if calls["n"] == 1:
            return []
        return original(self, key, seats)

    monkeypatch.setattr(SeatAvailabilityService, "conflicts", conflicts)


def test_lost_admission_race_is_a_seat_conflict(db, stations, rider, other_rider, monkeypatch):
    BookingService(db).create_booking(rider, BookingCreate(**booking_payload(seats=[5])))
    _stale_first_conflict_check(monkeypatch)

    with pytest.raises(SeatConflict) as exc:
        BookingService(db).create_booking(other_rider, BookingCreate(**booking_payload(seats=[4, 5])))

    assert exc.value.seats == [5]
    assert db.query(Booking).count() == 1
    assert db.query(SeatClaim).count() == 1


def test_lost_restore_race_keeps_booking_cancelled(db, stations, rider, other_rider, admin, monkeypatch):
    booking = BookingService(db).create_booking(rider, BookingCreate(**booking_payload(seats=[1, 2])))
    service = BookingStatusService(db)
    service.set_status(booking.id, admin, "cancelled")
    BookingService(db).create_booking(other_rider, BookingCreate(**booking_payload(seats=[2, 3])))
    _stale_first_conflict_check(monkeypatch)

    with pytest.raises(SeatConflict) as exc:
        service.set_status(booking.id, admin, "pending")

    assert exc.value.seats == [2]
    db.expire_all()
    restored = db.query(Booking).filter(Booking.id == booking.id).one()
    assert restored.status == "cancelled"
    assert restored.seat_claims == []
