import os

# Must be set before app.core.settings is imported anywhere.
os.environ["USE_MOCK_DB"] = "true"
os.environ["MOCK_DB_PATH"] = ""
os.environ["ENVIRONMENT"] = "development"

import pytest
from fastapi.testclient import TestClient

from app.config import firebase
from app.config.mock_firestore import MockFirestore
from app.main import app
from app.models.user import ROLE_ADMIN
from app.services import (
    address_service,
    cart_service,
    order_service,
    session_service,
    token_service,
    user_service,
)
from app.services.token_service import TokenService
from app.services.user_service import UserService


@pytest.fixture(autouse=True)
def mock_db(monkeypatch):
    """Fresh in-memory database and fresh service singletons for every test."""
    db = MockFirestore()
    monkeypatch.setattr(firebase, "db", db)
    monkeypatch.setattr(user_service, "_user_service", None)
    monkeypatch.setattr(session_service, "_session_service", None)
    monkeypatch.setattr(address_service, "_address_service", None)
    monkeypatch.setattr(cart_service, "_cart_service", None)
    monkeypatch.setattr(order_service, "_order_service", None)
    monkeypatch.setattr(token_service, "_token_service", None)
    return db


@pytest.fixture
def users(mock_db):
    return UserService(db=mock_db)


@pytest.fixture
def tokens():
    return TokenService(
        access_secret="test-access-secret-0123456789abcdef",
        refresh_secret="test-refresh-secret-0123456789abcdef",
    )


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_client():
    """Independent clients, each with its own cookie jar."""
    clients = []

    def _make():
        c = TestClient(app)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()


def login(client, phone, name=None):
    payload = {"phone_number": phone}
    if name:
        payload["name"] = name
    return client.post("/api/auth/login", json=payload)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_token(make_client, users):
    """Access token for a registered administrator."""
    c = make_client()
    login(c, "919900000000", "Store Admin")
    identity = users.get_user_by_phone("919900000000")
    identity.role = ROLE_ADMIN
    users.save_user(identity)
    return login(c, "919900000000").json()["tokens"]["access_token"]
