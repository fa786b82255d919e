# boutique/logic.py
import hmac
import logging
from typing import Any, Dict, List

from .config import Settings
from .database import ProductStore
from .errors import Unauthorized, ValidationError
from .mailer import OrderRelay
from .models import LoginIn, OrderIn, ProductIn, ProductUpdate
from .tokens import TokenService

logger = logging.getLogger(__name__)

# This file contains the logic behind each API endpoint. Routes in main.py
# only resolve dependencies and hand over here.


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


# Auth
def login_logic(payload: LoginIn, settings: Settings, tokens: TokenService) -> Dict[str, str]:
    if not payload.username or not payload.password:
        raise ValidationError("Username and password are required.")
    user_ok = _same(payload.username, settings.ADMIN_USERNAME)
    pass_ok = _same(payload.password, settings.ADMIN_PASSWORD)
    if not (user_ok and pass_ok):
        logger.warning("failed admin login for %r", payload.username)
        raise Unauthorized("Invalid credentials.")
    logger.info("admin %s logged in", settings.ADMIN_USERNAME)
    return {"token": tokens.issue(settings.ADMIN_USERNAME)}


# Product endpoints
def list_products_logic(store: ProductStore) -> List[Dict[str, Any]]:
    return store.list()


def create_product_logic(payload: ProductIn, store: ProductStore) -> Dict[str, Any]:
    return store.create(payload.name, payload.description, payload.price, payload.category)


def update_product_logic(product_id: str, payload: ProductUpdate, store: ProductStore) -> Dict[str, Any]:
    return store.update(product_id, payload.changes())


def delete_product_logic(product_id: str, store: ProductStore) -> Dict[str, Any]:
    removed = store.delete(product_id)
    return {"success": True, "removed": removed}


# Orders
def place_order_logic(payload: OrderIn, relay: OrderRelay) -> Dict[str, bool]:
    relay.relay(payload)
    return {"success": True}
