# tests/test_api.py
import pathlib

import pytest

from tests.conftest import ADMIN


def test_end_to_end_catalog_flow(client):
    r = client.post("/api/login", json=ADMIN)
    assert r.status_code == 200
    headers = {"Authorization": f"Bearer {r.json()['token']}"}

    r = client.post("/api/products", json={"name": "Birthday Card", "description": "Floral design"}, headers=headers)
    assert r.status_code == 201
    card = r.json()
    assert card["id"]
    assert card["price"] is None
    assert card["category"] is None

    assert client.get("/api/products").json() == [card]

    r = client.put(f"/api/products/{card['id']}", json={"price": 150}, headers=headers)
    assert r.status_code == 200
    assert r.json()["price"] == 150

    r = client.delete(f"/api/products/{card['id']}", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["removed"]["id"] == card["id"]

    assert client.get("/api/products").json() == []


@pytest.mark.parametrize("payload", [{}, {"username": "admin"}, {"password": "x"}, {"username": "", "password": ""}])
def test_login_missing_fields(client, payload):
    r = client.post("/api/login", json=payload)
    assert r.status_code == 400
    assert r.json() == {"error": "Username and password are required."}


def test_login_without_body(client):
    assert client.post("/api/login").status_code == 400


@pytest.mark.parametrize("payload", [
    {"username": "admin", "password": "wrong"},
    {"username": "root", "password": ADMIN["password"]},
])
def test_login_bad_credentials(client, payload):
    r = client.post("/api/login", json=payload)
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid credentials."}


def test_list_is_public_and_empty_by_default(client):
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json() == []


def test_mutations_without_authorization_leave_store_untouched(client, store, auth_headers):
    existing = client.post("/api/products", json={"name": "Card", "description": "Plain"}, headers=auth_headers).json()
    before = store.list()

    assert client.post("/api/products", json={"name": "X", "description": "Y"}).status_code == 401
    assert client.put(f"/api/products/{existing['id']}", json={"name": "X"}).status_code == 401
    assert client.delete(f"/api/products/{existing['id']}").status_code == 401

    assert store.list() == before


@pytest.mark.parametrize("header", [
    "Bearer",
    "Bearer ",
    "bearer abc",
    "Basic YWRtaW46czNjcmV0",
    "Token abc",
])
def test_malformed_authorization_header(client, header):
    r = client.post("/api/products", json={"name": "X", "description": "Y"}, headers={"Authorization": header})
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_invalid_token(client):
    r = client.post("/api/products", json={"name": "X", "description": "Y"},
                    headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid or expired token"}


def test_create_validation(client, store, auth_headers):
    r = client.post("/api/products", json={"name": "Card"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json() == {"error": "Name and description are required."}
    assert store.list() == []


def test_create_with_all_fields(client, auth_headers):
    r = client.post("/api/products", json={
        "name": "Wedding Invite", "description": "Gold foil", "price": 3.75, "category": "wedding",
    }, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["price"] == 3.75
    assert r.json()["category"] == "wedding"


def test_update_distinguishes_null_from_omitted_price(client, auth_headers):
    card = client.post("/api/products", json={"name": "Card", "description": "Plain", "price": 5},
                       headers=auth_headers).json()
    url = f"/api/products/{card['id']}"

    r = client.put(url, json={"name": "Renamed"}, headers=auth_headers)
    assert r.json()["price"] == 5

    r = client.put(url, json={}, headers=auth_headers)
    assert r.json() == {**card, "name": "Renamed"}

    r = client.put(url, json={"price": None}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["price"] is None


def test_update_and_delete_unknown_product(client, auth_headers):
    r = client.put("/api/products/prod-0", json={"name": "X"}, headers=auth_headers)
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found."}
    assert client.delete("/api/products/prod-0", headers=auth_headers).status_code == 404


def test_second_delete_is_not_found(client, auth_headers):
    card = client.post("/api/products", json={"name": "Card", "description": "Plain"}, headers=auth_headers).json()
    assert client.delete(f"/api/products/{card['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/products/{card['id']}", headers=auth_headers).status_code == 404


def test_malformed_json_body(client, auth_headers):
    r = client.post("/api/products", content=b"{not json", headers={**auth_headers, "Content-Type": "application/json"})
    assert r.status_code == 400
    assert "error" in r.json()


def test_persistence_failure_is_a_generic_500(client, auth_headers, store, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store.path = blocker / "products.json"
    r = client.post("/api/products", json={"name": "Card", "description": "Plain"}, headers=auth_headers)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to save products."}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_spa_fallback_serves_shell_and_static_files(client, settings):
    root = pathlib.Path(settings.STATIC_DIR)
    root.mkdir()
    (root / "index.html").write_text("<html>shell</html>", encoding="utf-8")
    (root / "style.css").write_text("body{}", encoding="utf-8")

    assert client.get("/").text == "<html>shell</html>"
    assert client.get("/admin/products").text == "<html>shell</html>"
    assert client.get("/style.css").text == "body{}"


def test_spa_fallback_without_shell(client):
    r = client.get("/anything")
    assert r.status_code == 404
    assert r.json() == {"error": "Not found."}


@pytest.mark.parametrize("content", ["[1, 2]", '[{"id": "prod-1", "name": "Old"}]'])
def test_malformed_entries_do_not_break_the_catalog(client, auth_headers, settings, content):
    pathlib.Path(settings.PRODUCTS_FILE).write_text(content, encoding="utf-8")

    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json() == []

    r = client.post("/api/products", json={"name": "Card", "description": "Plain"}, headers=auth_headers)
    assert r.status_code == 201
    assert client.get("/api/products").json() == [r.json()]


def test_nan_price_is_stored_as_null(client, auth_headers, settings):
    r = client.post("/api/products", content=b'{"name": "Card", "description": "Plain", "price": NaN}',
                    headers={**auth_headers, "Content-Type": "application/json"})
    assert r.status_code == 201
    assert r.json()["price"] is None
    assert "NaN" not in pathlib.Path(settings.PRODUCTS_FILE).read_text(encoding="utf-8")
