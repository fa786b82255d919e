# tests/test_orders.py
import pytest
from fastapi.testclient import TestClient

from boutique.mailer import OrderRelay, order_summary
from boutique.main import create_app
from boutique.models import OrderIn
from tests.conftest import FakeTransport

ORDER = {
    "name": "Alice",
    "email": "alice@example.com",
    "phone": "555-0100",
    "cardType": "Wedding",
    "quantity": 20,
    "message": "Cream paper, gold lettering",
}


def test_order_sends_admin_copy_and_acknowledgment(client, transport):
    r = client.post("/api/orders", json=ORDER)
    assert r.status_code == 200
    assert r.json() == {"success": True}

    admin_mail, customer_mail = transport.sent
    assert admin_mail["To"] == "owner@cards.test"
    assert admin_mail["From"] == "shop@cards.test"
    assert admin_mail["Subject"] == "New card order request from your website"
    assert "Card type: Wedding" in admin_mail.get_content()

    assert customer_mail["To"] == "alice@example.com"
    assert customer_mail["Subject"] == "We received your card order request"
    body = customer_mail.get_content()
    assert body.startswith("Hi Alice,")
    assert "Cream paper, gold lettering" in body
    assert body.rstrip().endswith("Card Boutique")


@pytest.mark.parametrize("missing", ["name", "email", "message"])
def test_order_requires_name_email_message(client, transport, missing):
    payload = {**ORDER, missing: ""}
    r = client.post("/api/orders", json=payload)
    assert r.status_code == 400
    assert r.json() == {"error": "Name, email, and order details are required."}
    assert transport.sent == []


def test_order_without_mail_configuration(settings, store):
    app = create_app(settings, store=store)
    r = TestClient(app).post("/api/orders", json=ORDER)
    assert r.status_code == 500
    assert r.json()["error"].startswith("Email is not configured on the server.")


def test_catalog_works_without_mail_configuration(settings, store):
    c = TestClient(create_app(settings, store=store))
    assert c.get("/api/products").status_code == 200
    assert c.post("/api/login", json={"username": "admin", "password": "s3cret"}).status_code == 200


@pytest.mark.parametrize("fail_on", [1, 2])
def test_any_failed_send_fails_the_order(settings, store, fail_on):
    relay = OrderRelay(settings.ADMIN_EMAIL, transport=FakeTransport(fail_on=fail_on))
    r = TestClient(create_app(settings, store=store, relay=relay)).post("/api/orders", json=ORDER)
    assert r.status_code == 500
    assert r.json() == {"error": "We could not send emails right now. Please try again later or contact us directly."}


def test_summary_skips_optional_fields():
    order = OrderIn(name="Bob", email="bob@example.com", message="One card", quantity=-3)
    assert order_summary(order) == [
        "Name: Bob",
        "Email: bob@example.com",
        "",
        "Order details:",
        "One card",
    ]


def test_summary_includes_positive_quantity():
    order = OrderIn(**ORDER)
    assert "Quantity: 20" in order_summary(order)
    assert "Phone: 555-0100" in order_summary(order)


def test_transport_is_built_once():
    calls = []

    def factory():
        calls.append(1)
        return FakeTransport()

    relay = OrderRelay("owner@cards.test", transport_factory=factory)
    relay.relay(OrderIn(**ORDER))
    relay.relay(OrderIn(**ORDER))
    assert len(calls) == 1
    assert len(relay.transport.sent) == 4
