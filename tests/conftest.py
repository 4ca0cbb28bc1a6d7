import pytest

from diary.auth.jwt import create_session_token
from main import create_app

JWT_SECRET = "test-secret"


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-key",
            "DATABASE_URL": None,
            "SQLITE_PATH": str(tmp_path / "diary.db"),
            "AUTH_JWT_SECRET": JWT_SECRET,
            "AUTH_COOKIE_SECURE": False,
            "SKIP_AUTH": False,
            "AUTH_DEV_LOGIN_ENABLED": True,
            "GOOGLE_CLIENT_ID": None,
            "GOOGLE_CLIENT_SECRET": None,
            "CORS_ALLOW_ORIGIN": None,
        }
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def bearer(user_id, email=None):
    token = create_session_token(
        user_id=user_id,
        email=email or f"{user_id}@example.com",
        secret=JWT_SECRET,
        ttl_minutes=60,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer


@pytest.fixture
def alice():
    return bearer("alice")


@pytest.fixture
def bob():
    return bearer("bob")
