import os

# Configure the app before it is imported: in-memory database, known
# secrets and cheap password hashing.
os.environ["ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APIKEY"] = "test-api-key"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from tracker.database import engine
from tracker.main import app

API_KEY = "test-api-key"


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test empty tables."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def register(client):
    """Register a user and return `(headers, body)` for authenticated calls."""
    def _register(username="alice", email=None, password="secret1", name="Alice Doe"):
        payload = {
            "name": name,
            "email": email or f"{username}@example.com",
            "username": username,
            "password": password,
        }
        r = client.post("/auth/register", json=payload, headers={"apikey": API_KEY})
        assert r.status_code == 201, r.text
        body = r.json()
        headers = {"apikey": API_KEY, "Authorization": f"Bearer {body['data']['token']}"}
        return headers, body
    return _register


@pytest.fixture
def headers(register):
    return register()[0]
