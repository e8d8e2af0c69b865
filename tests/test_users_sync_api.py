from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.services.errors import StoreUnavailable
from app.services.profile_store import ProfileStore


def _sync(client, **body):
    base = {"userId": "u1", "email": "u1@x.com"}
    base.update(body)
    return client.post("/api/users/sync", json=base)


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_sync_creates_user(client):
    r = _sync(client, fullName="", profilePicture="", authProvider="email")

    assert r.status_code == 200
    user = r.json()["user"]
    assert user["id"] == "u1"
    assert user["full_name"] is None
    assert user["profile_picture"] is None
    assert user["email_verified"] is False
    assert user["auth_provider"] == "email"


def test_sync_keeps_existing_name_and_fills_picture(client):
    _sync(client, fullName="Alice")

    r = _sync(client, fullName="Alicia", profilePictureUrl="http://x/pic.png", googleId="g-1")

    user = r.json()["user"]
    assert user["full_name"] == "Alice"
    assert user["profile_picture"] == "http://x/pic.png"
    assert user["provider_id"] == "g-1"


def test_sync_missing_required_fields_is_400(client):
    r = client.post("/api/users/sync", json={"email": "a@b.com"})
    assert r.status_code == 400
    assert r.json()["detail"]["message"] == "invalid_input"

    r = _sync(client, userId="")
    assert r.status_code == 400

    r = client.post("/api/users/sync", json={"userId": "u1"})
    assert r.status_code == 400


def test_edit_clears_picture_and_overrides_name(client):
    _sync(client, fullName="Alice", profilePicture="http://x/a.png")

    r = client.put("/api/users/sync", json={"userId": "u1", "fullName": "Al", "profilePicture": None})

    assert r.status_code == 200
    user = r.json()["user"]
    assert user["full_name"] == "Al"
    assert user["profile_picture"] is None


def test_edit_without_fields_keeps_values(client):
    _sync(client, fullName="Alice", profilePicture="http://x/a.png")

    r = client.put("/api/users/sync", json={"userId": "u1", "emailVerified": True})

    user = r.json()["user"]
    assert user["email_verified"] is True
    assert user["full_name"] == "Alice"
    assert user["profile_picture"] == "http://x/a.png"


def test_edit_errors(client):
    r = client.put("/api/users/sync", json={"fullName": "x"})
    assert r.status_code == 400

    r = client.put("/api/users/sync", json={"userId": "ghost", "fullName": "x"})
    assert r.status_code == 404
    assert r.json()["detail"]["message"] == "user_not_found"


def test_auth_event_flow(client):
    r = client.post("/api/users/sync/auth-event", json={"event": "TOKEN_REFRESHED", "user": {"id": "u1"}})
    assert r.status_code == 200
    assert r.json() == {"user": None, "skipped": True}

    r = client.post(
        "/api/users/sync/auth-event",
        json={
            "event": "SIGNED_IN",
            "user": {
                "id": "u1",
                "email": "u1@x.com",
                "email_confirmed_at": "2025-03-01T12:00:00Z",
                "user_metadata": {"name": "Jane Doe"},
            },
        },
    )
    assert r.status_code == 200
    body = r.json()
    assert body["skipped"] is False
    assert body["user"]["full_name"] == "Jane Doe"
    assert body["user"]["email_verified"] is True


def test_get_user(client):
    assert client.get("/api/users/u1").status_code == 404

    _sync(client, fullName="Alice")
    r = client.get("/api/users/u1")
    assert r.status_code == 200
    assert r.json()["user"]["full_name"] == "Alice"


def test_store_failure_is_500(settings_factory):
    store = MagicMock(spec=ProfileStore)
    store.get_by_user_id.side_effect = StoreUnavailable("connection refused")
    client = TestClient(create_app(settings_factory(), store=store))

    r = client.post("/api/users/sync", json={"userId": "u1", "email": "u1@x.com"})

    assert r.status_code == 500
    assert r.json()["detail"]["message"] == "store_unavailable"


def test_edit_null_email_verified_is_400(client):
    _sync(client, fullName="Alice")

    r = client.put("/api/users/sync", json={"userId": "u1", "emailVerified": None})

    assert r.status_code == 400
    assert r.json()["detail"]["message"] == "invalid_input"
    assert client.get("/api/users/u1").json()["user"]["email_verified"] is False


def test_auth_event_ignores_non_string_metadata(client):
    r = client.post(
        "/api/users/sync/auth-event",
        json={
            "event": "SIGNED_IN",
            "user": {"id": "u1", "email": "u1@x.com", "user_metadata": {"name": 123, "given_name": "Jane"}},
        },
    )

    assert r.status_code == 200
    user = r.json()["user"]
    assert user["full_name"] is None
    assert user["first_name"] == "Jane"


def test_auth_event_with_non_string_id_is_400(client):
    r = client.post(
        "/api/users/sync/auth-event",
        json={"event": "SIGNED_IN", "user": {"id": 123, "email": "u1@x.com"}},
    )

    assert r.status_code == 400
    assert r.json()["detail"]["message"] == "invalid_input"


def test_require_auth_without_secret_fails_at_startup(settings_factory):
    with pytest.raises(RuntimeError):
        create_app(settings_factory(require_auth=True, supabase_jwt_secret=None))
