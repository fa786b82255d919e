#!/usr/bin/env python
import os
from sdk.pyboutique import BoutiqueClient


def main():
    c = BoutiqueClient(base_url=os.getenv("BOUTIQUE_URL", "http://127.0.0.1:3000"))

    # -----------------------------
    # Log in as admin
    # -----------------------------
    print("Logging in...")
    c.login(os.getenv("ADMIN_USERNAME", "admin"), os.getenv("ADMIN_PASSWORD", "change_this_password"))
    print("token:", c.token[:24] + "...")

    # -----------------------------
    # Create a product (no price: on request)
    # -----------------------------
    print("\nCreating product...")
    card = c.create_product("Birthday Card", "Floral design")
    print(card)

    # -----------------------------
    # List products
    # -----------------------------
    print("\nListing products...")
    print(c.list_products())

    # -----------------------------
    # Set, then clear, the price
    # -----------------------------
    print("\nSetting price...")
    print(c.update_product(card["id"], price=150))
    print("\nClearing price...")
    print(c.update_product(card["id"], price=None))

    # -----------------------------
    # Delete it again
    # -----------------------------
    print("\nDeleting product...")
    print(c.delete_product(card["id"]))

    print("\nListing products after delete...")
    print(c.list_products())

    # -----------------------------
    # Order request (needs MAIL_* on the server)
    # -----------------------------
    print("\nSending order request...")
    r = c.place_order("Alice", "alice@example.com", "Ten wedding invitations, cream paper", quantity=10)
    print(r.status_code, r.json())


if __name__ == "__main__":
    main()
