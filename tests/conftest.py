import pytest

from app import app as flask_app
from myreps import accounts


@pytest.fixture
def data_dir(tmp_path):
    """A fresh data directory; tables are created and seeded on first access."""
    return str(tmp_path / "data")


@pytest.fixture
def app(data_dir, tmp_path):
    flask_app.config.update(
        TESTING=True,
        SECRET_KEY="test-secret",
        DATA_DIR=data_dir,
        ACTION_LOG_FILE=str(tmp_path / "logs.jsonl"),
        GEMINI_API_KEY="test-key",
        GEMINI_MODEL_NAME="gemini-test",
        GEMINI_TIMEOUT=5,
        REST_SECONDS=90,
    )
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def profile(data_dir):
    return accounts.register(data_dir, "ana@example.com", "secret123", "Ana")


@pytest.fixture
def auth_client(client, profile):
    resp = client.post("/auth/login", json={"email": "ana@example.com", "password": "secret123"})
    assert resp.status_code == 200
    return client


@pytest.fixture
def admin_client(app, data_dir):
    accounts.register(data_dir, "admin@example.com", "adminpass", "Admin", role="admin")
    client = app.test_client()
    resp = client.post("/auth/login", json={"email": "admin@example.com", "password": "adminpass"})
    assert resp.status_code == 200
    return client
