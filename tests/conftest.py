"""
Shared fixtures.

The suite needs no running database: routes are exercised with FastAPI's
TestClient while the model functions (or the jobly.db helpers underneath
them) are patched.

    pip install -e ".[test]"
    pytest -v
"""
import os

os.environ.setdefault("SECRET_KEY", "secret-dev")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from jobly.auth_utils import create_token  # noqa: E402
from jobly.main import app  # noqa: E402


@pytest.fixture
def client():
    """FastAPI test client; unhandled errors come back as 500 responses."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def u1_token():
    return create_token({"username": "u1", "isAdmin": False})


@pytest.fixture
def a1_token():
    return create_token({"username": "a1", "isAdmin": True})


@pytest.fixture
def u1_headers(u1_token):
    return {"Authorization": f"Bearer {u1_token}"}


@pytest.fixture
def a1_headers(a1_token):
    return {"Authorization": f"Bearer {a1_token}"}
