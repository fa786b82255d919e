import asyncio
import os
from sdk.pyboutique import BoutiqueClient
import requests


async def create_card(base_url, token, n):
    # own session per task
    client = BoutiqueClient(base_url=base_url, token=token)
    try:
        p = await asyncio.to_thread(client.create_product, f"Card #{n}", "Concurrent demo card", 2.5 * n)
        print(f"✅ created {p['id']} ({p['name']})")
        return p
    except requests.exceptions.HTTPError as e:
        print(f"❌ create #{n} failed with error: {e}")
        return None


async def main():
    c = BoutiqueClient(base_url=os.getenv("BOUTIQUE_URL", "http://127.0.0.1:3000"))
    c.login(os.getenv("ADMIN_USERNAME", "admin"), os.getenv("ADMIN_PASSWORD", "change_this_password"))

    before = {p["id"] for p in c.list_products()}

    # Fire creates at the same time; every one must survive in the catalog
    print("\n⚡ Creating 10 products concurrently...")
    created = await asyncio.gather(*(create_card(c.base_url, c.token, n) for n in range(1, 11)))
    created_ids = {p["id"] for p in created if p}

    after = {p["id"] for p in await c.list_products_async()}
    lost = created_ids - after
    print(f"\n📦 created {len(created_ids)}, catalog grew by {len(after - before)}, lost {len(lost)}")

    # Clean up
    for pid in created_ids:
        c.delete_product(pid)


if __name__ == "__main__":
    asyncio.run(main())
