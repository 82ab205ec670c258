from datetime import timedelta

from src.auth.utils import create_access_token

from conftest import PASSWORD, auth_headers

AUTH = "/api/v1/auth"


def _register(client, **overrides):
    payload = {"username": "carol", "email": "carol@example.com", "password": "hunter22"}
    payload.update(overrides)
    return client.post(f"{AUTH}/register", json=payload)


def test_register_rider_is_active(client):
    response = _register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "rider"
    assert body["user"]["status"] == "active"
    assert "password" not in body["user"]


def test_register_station_master_is_pending(client):
    response = _register(client, role="station_master")
    assert response.json()["user"]["status"] == "pending"


def test_admin_cannot_self_register(client):
    response = _register(client, role="admin")
    assert response.status_code == 403


def test_duplicate_email(client):
    _register(client)
    response = _register(client, username="other")
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_login_and_profile(client, rider):
    response = client.post(f"{AUTH}/login", json={"email": rider.email, "password": PASSWORD})
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == rider.email


def test_login_with_wrong_password(client, rider):
    response = client.post(f"{AUTH}/login", json={"email": rider.email, "password": "nope"})
    assert response.status_code == 401


def test_missing_and_invalid_tokens(client):
    assert client.get(f"{AUTH}/me").status_code == 401
    response = client.get(f"{AUTH}/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_expired_token(client, rider):
    token = create_access_token({"sub": str(rider.id)}, expires_delta=timedelta(seconds=-1))
    response = client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_deleted_user(client, rider, db):
    headers = auth_headers(rider)
    db.delete(rider)
    db.commit()
    assert client.get(f"{AUTH}/me", headers=headers).status_code == 401
