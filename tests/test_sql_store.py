from datetime import datetime, timezone

import pytest
from sqlalchemy import text

from app.schemas.profile import WritePayload
from app.services.errors import NotFound, ProfileConflict, StoreUnavailable

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _create_payload(user_id="u1", **fields) -> WritePayload:
    base = {
        "id": user_id,
        "email": f"{user_id}@x.com",
        "full_name": None,
        "first_name": None,
        "last_name": None,
        "profile_picture": None,
        "provider_id": None,
        "auth_provider": "email",
        "email_verified": False,
        "created_at": NOW,
        "updated_at": NOW,
    }
    base.update(fields)
    return WritePayload(kind="create", user_id=user_id, fields=base)


def test_get_missing_returns_none(sql_store):
    assert sql_store.get_by_user_id("nobody") is None


def test_create_and_get(sql_store):
    created = sql_store.create(_create_payload(full_name="Jane", provider_id="g-1"))

    assert created.id == "u1"
    assert created.full_name == "Jane"
    assert created.provider_id == "g-1"
    assert created.email_verified is False

    fetched = sql_store.get_by_user_id("u1")
    assert fetched.full_name == "Jane"
    assert fetched.auth_provider == "email"


def test_provider_id_is_stored_in_google_id_column(sql_store):
    sql_store.create(_create_payload(provider_id="g-42"))

    with sql_store._session_factory() as db:
        value = db.execute(text("SELECT google_id FROM users WHERE id = 'u1'")).scalar_one()
    assert value == "g-42"


def test_duplicate_create_raises_conflict(sql_store):
    sql_store.create(_create_payload())
    with pytest.raises(ProfileConflict):
        sql_store.create(_create_payload())


def test_update_only_touches_given_fields(sql_store):
    sql_store.create(_create_payload(full_name="Jane", profile_picture="p.png"))

    updated = sql_store.update(
        "u1",
        WritePayload(kind="update", user_id="u1", fields={"first_name": "J", "updated_at": NOW}),
    )

    assert updated.first_name == "J"
    assert updated.full_name == "Jane"
    assert updated.profile_picture == "p.png"


def test_update_can_clear_field(sql_store):
    sql_store.create(_create_payload(profile_picture="p.png"))

    updated = sql_store.update(
        "u1",
        WritePayload(kind="update", user_id="u1", fields={"profile_picture": None, "updated_at": NOW}),
    )
    assert updated.profile_picture is None


def test_update_missing_raises_not_found(sql_store):
    with pytest.raises(NotFound):
        sql_store.update("ghost", WritePayload(kind="update", user_id="ghost", fields={"updated_at": NOW}))


def test_write_failure_does_not_expose_sql(sql_store):
    sql_store.create(_create_payload())

    with pytest.raises(StoreUnavailable) as exc:
        sql_store.update(
            "u1",
            WritePayload(kind="update", user_id="u1", fields={"email_verified": None, "updated_at": NOW}),
        )

    assert exc.value.detail == "database write failed"
    assert "NOT NULL" not in exc.value.detail
    assert "UPDATE" not in exc.value.detail
