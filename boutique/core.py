# boutique/core.py
import math
import numbers
import time
from typing import Any, Dict, Iterable, Optional

from .errors import ValidationError

# Helpers shared by the product stores. Products are plain dicts so they
# serialize straight into the JSON document.


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def _normalize_price(value: Any) -> Optional[float]:
    return value if _is_number(value) else None


def _new_product_id(taken: Iterable[str], now: Optional[float] = None) -> str:
    """Time-based id; bumps the millisecond until it is unused."""
    millis = int((now if now is not None else time.time()) * 1000)
    taken = set(taken)
    while f"prod-{millis}" in taken:
        millis += 1
    return f"prod-{millis}"


def _make_product_dict(product_id: str, name: Any, description: Any,
                       price: Any = None, category: Any = None) -> Dict[str, Any]:
    if not name or not description:
        raise ValidationError("Name and description are required.")
    return {
        "id": product_id,
        "name": name,
        "description": description,
        "price": _normalize_price(price),
        "category": category or None,
    }


def _merge_product(current: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    for field in ("name", "description"):
        if field in changes and changes[field] == "":
            raise ValidationError("Name and description cannot be empty.")
    merged = dict(current)
    for field in ("name", "description", "category"):
        if changes.get(field) is not None:
            merged[field] = changes[field]
    if "price" in changes:
        price = changes["price"]
        # explicit null clears the price; anything non-numeric is ignored
        if price is None or _is_number(price):
            merged["price"] = price
    return merged


def _clean_record(entry: Any) -> Optional[Dict[str, Any]]:
    """A stored entry as a product dict, or None when it cannot be one."""
    if not isinstance(entry, dict):
        return None
    for field in ("id", "name", "description"):
        if not isinstance(entry.get(field), str) or not entry[field]:
            return None
    category = entry.get("category")
    return {
        "id": entry["id"],
        "name": entry["name"],
        "description": entry["description"],
        "price": _normalize_price(entry.get("price")),
        "category": category if isinstance(category, str) and category else None,
    }
