import os
import tempfile
import uuid

import pytest

_db_dir = tempfile.mkdtemp(prefix="precifix-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"

from fastapi.testclient import TestClient  # noqa: E402

from precifix.main import app  # noqa: E402


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client


def register_user(client, email=None, password="secret123", **extra):
    email = email or f"user-{uuid.uuid4().hex[:10]}@example.com"
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, **extra}
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client):
    """Cada teste recebe um usuario novo (dados isolados)"""
    data = register_user(client, company_name="Brilho Car")
    return {"Authorization": f"Bearer {data['access_token']}"}


@pytest.fixture
def other_headers(client):
    data = register_user(client)
    return {"Authorization": f"Bearer {data['access_token']}"}
