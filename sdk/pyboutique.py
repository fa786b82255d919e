# sdk/pyboutique.py
import httpx
import requests
from typing import Any, Dict, Optional
from rich import print

# Sentinel so update_product can tell "leave price alone" from "clear price"
_UNSET: Any = object()


class BoutiqueClient:
    def __init__(self, base_url: str = "http://localhost:3000", token: Optional[str] = None, timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout
        self.token = None
        if token:
            self.use_token(token)

    def use_token(self, token: str):
        self.token = token
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    def health(self):
        r = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Auth
    def login(self, username: str, password: str) -> str:
        r = self.session.post(f"{self.base_url}/api/login", json={
            "username": username, "password": password
        }, timeout=self.timeout)
        r.raise_for_status()
        token = r.json()["token"]
        self.use_token(token)
        return token

    # Catalog
    def list_products(self):
        r = self.session.get(f"{self.base_url}/api/products", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    async def list_products_async(self):
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(f"{self.base_url}/api/products")
            r.raise_for_status()
            return r.json()

    def create_product(self, name: str, description: str, price: Optional[float] = None, category: Optional[str] = None):
        payload: Dict[str, Any] = {"name": name, "description": description}
        if price is not None:
            payload["price"] = price
        if category:
            payload["category"] = category
        r = self.session.post(f"{self.base_url}/api/products", json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def update_product(self, product_id: str, name: Optional[str] = None, description: Optional[str] = None,
                       price: Any = _UNSET, category: Optional[str] = None):
        # price=None sends an explicit null, which clears the price
        payload: Dict[str, Any] = {}
        if name is not None:
            payload["name"] = name
        if description is not None:
            payload["description"] = description
        if price is not _UNSET:
            payload["price"] = price
        if category is not None:
            payload["category"] = category
        r = self.session.put(f"{self.base_url}/api/products/{product_id}", json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_product(self, product_id: str):
        r = self.session.delete(f"{self.base_url}/api/products/{product_id}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Orders
    def place_order(self, name: str, email: str, message: str, phone: Optional[str] = None,
                    card_type: Optional[str] = None, quantity: Optional[int] = None):
        payload: Dict[str, Any] = {"name": name, "email": email, "message": message}
        if phone:
            payload["phone"] = phone
        if card_type:
            payload["cardType"] = card_type
        if quantity is not None:
            payload["quantity"] = quantity
        r = self.session.post(f"{self.base_url}/api/orders", json=payload, timeout=self.timeout)
        # do not r.raise_for_status() here: a 500 carries a user-facing {"error": ...}
        return r


def error_message(exc: requests.exceptions.HTTPError) -> str:
    """Pull the server's {"error": ...} text out of a failed response."""
    resp = exc.response
    if resp is None:
        return str(exc)
    try:
        return resp.json().get("error") or f"HTTP {resp.status_code}"
    except ValueError:
        return f"HTTP {resp.status_code}: {resp.text}"


if __name__ == "__main__":
    import argparse
    import os

    parser = argparse.ArgumentParser(description="Card Boutique API client")
    parser.add_argument("--base-url", default=os.getenv("BOUTIQUE_URL", "http://127.0.0.1:3000"))
    parser.add_argument("--token", default=os.getenv("BOUTIQUE_TOKEN"), help="Admin bearer token")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Auth
    # ---------------------------
    li = subparsers.add_parser("login", help="Log in as admin and print the token")
    li.add_argument("--username", required=True)
    li.add_argument("--password", required=True)

    # ---------------------------
    # Product commands
    # ---------------------------
    subparsers.add_parser("list-products", help="List all products")

    cp = subparsers.add_parser("create-product", help="Create a product (admin)")
    cp.add_argument("--name", required=True)
    cp.add_argument("--description", required=True)
    cp.add_argument("--price", type=float, help="Leave out for 'price on request'")
    cp.add_argument("--category")

    up = subparsers.add_parser("update-product", help="Update a product (admin)")
    up.add_argument("--product-id", required=True)
    up.add_argument("--name")
    up.add_argument("--description")
    up.add_argument("--price", type=float)
    up.add_argument("--clear-price", action="store_true", help="Set the price back to 'on request'")
    up.add_argument("--category")

    dp = subparsers.add_parser("delete-product", help="Delete a product (admin)")
    dp.add_argument("--product-id", required=True)

    # ---------------------------
    # Order commands
    # ---------------------------
    po = subparsers.add_parser("place-order", help="Send an order request")
    po.add_argument("--name", required=True)
    po.add_argument("--email", required=True)
    po.add_argument("--message", required=True)
    po.add_argument("--phone")
    po.add_argument("--card-type")
    po.add_argument("--quantity", type=int)

    # ---------------------------
    # Parse and execute
    # ---------------------------
    args = parser.parse_args()
    c = BoutiqueClient(base_url=args.base_url, token=args.token)

    try:
        if args.command == "login":
            print(c.login(args.username, args.password))

        elif args.command == "list-products":
            print(c.list_products())

        elif args.command == "create-product":
            print(c.create_product(args.name, args.description, args.price, args.category))

        elif args.command == "update-product":
            price = None if args.clear_price else (args.price if args.price is not None else _UNSET)
            print(c.update_product(args.product_id, args.name, args.description, price, args.category))

        elif args.command == "delete-product":
            print(c.delete_product(args.product_id))

        elif args.command == "place-order":
            r = c.place_order(args.name, args.email, args.message, args.phone, args.card_type, args.quantity)
            print(r.json())
    except requests.exceptions.HTTPError as e:
        print(f"[red]{error_message(e)}[/red]")
        raise SystemExit(1)
