# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.db.session import Base, make_engine, make_session_factory
from app.main import create_app
from app.services.profile_service import ProfileSyncService
from app.services.sql_store import SqlProfileStore

JWT_SECRET = "test-jwt-secret-for-pytest-only"


def make_settings(**overrides) -> Settings:
    # .env 영향을 받지 않도록 _env_file=None
    values = {
        "profile_store": "sql",
        "database_url": "sqlite://",
        "require_auth": False,
        "supabase_jwt_secret": JWT_SECRET,
        "supabase_issuer": None,
        "supabase_jwt_audience": "authenticated",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def sql_store() -> SqlProfileStore:
    """테스트마다 새 메모리 SQLite"""
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield SqlProfileStore(make_session_factory(engine))
    engine.dispose()


@pytest.fixture
def service(sql_store) -> ProfileSyncService:
    return ProfileSyncService(sql_store)


@pytest.fixture
def client(sql_store) -> TestClient:
    app = create_app(make_settings(), store=sql_store)
    return TestClient(app)


@pytest.fixture
def auth_client(sql_store) -> TestClient:
    app = create_app(make_settings(require_auth=True), store=sql_store)
    return TestClient(app)


@pytest.fixture
def make_token():
    """Supabase access token 과 같은 모양의 HS256 토큰 발급"""
    import time
    from jose import jwt

    def _make(sub: str, secret: str = JWT_SECRET, **claims) -> str:
        now = int(time.time())
        payload = {
            "sub": sub,
            "email": f"{sub}@example.com",
            "aud": "authenticated",
            "role": "authenticated",
            "iat": now,
            "exp": now + 3600,
        }
        payload.update(claims)
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest.fixture
def settings_factory():
    return make_settings
