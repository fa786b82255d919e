# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from boutique.config import Settings
from boutique.database import JsonFileProductStore
from boutique.mailer import OrderRelay
from boutique.main import create_app

ADMIN = {"username": "admin", "password": "s3cret"}


class FakeTransport:
    def __init__(self, fail_on: int = 0):
        self.sent = []
        self.fail_on = fail_on

    def send(self, message):
        if self.fail_on and len(self.sent) + 1 == self.fail_on:
            raise OSError("connection refused")
        self.sent.append(message)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        JWT_SECRET="api-test-signing-secret-0123456789",
        ADMIN_USERNAME=ADMIN["username"],
        ADMIN_PASSWORD=ADMIN["password"],
        ADMIN_EMAIL="owner@cards.test",
        MAIL_USER="shop@cards.test",
        PRODUCTS_FILE=str(tmp_path / "products.json"),
        STATIC_DIR=str(tmp_path / "public"),
    )


@pytest.fixture
def store(settings):
    return JsonFileProductStore(settings.PRODUCTS_FILE)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def app(settings, store, transport):
    relay = OrderRelay(settings.ADMIN_EMAIL, sender=settings.MAIL_USER, transport=transport)
    return create_app(settings, store=store, relay=relay)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    r = client.post("/api/login", json=ADMIN)
    return {"Authorization": f"Bearer {r.json()['token']}"}
