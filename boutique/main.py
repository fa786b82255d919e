# boutique/main.py
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from .auth import get_tokens, require_admin
from .config import DEFAULT_JWT_SECRET, Settings, get_settings
from .database import JsonFileProductStore, ProductStore
from .errors import BoutiqueError
from .log import configure_logging
from .logic import (
    create_product_logic, delete_product_logic, list_products_logic,
    login_logic, place_order_logic, update_product_logic,
)
from .mailer import OrderRelay, build_transport
from .models import (
    DeleteOut, LoginIn, OrderIn, Product, ProductIn, ProductUpdate,
    SuccessOut, TokenOut,
)
from .tokens import TokenService

logger = logging.getLogger(__name__)


# ---------------------------
# Dependencies
# ---------------------------
def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


def get_relay(request: Request) -> OrderRelay:
    return request.app.state.relay


# ---------------------------
# Error mapping
# ---------------------------
async def _boutique_error(request: Request, exc: BoutiqueError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _bad_body(request: Request, exc: RequestValidationError):
    logger.debug("rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


async def _unexpected(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ProductStore] = None,
    tokens: Optional[TokenService] = None,
    relay: Optional[OrderRelay] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    if settings.JWT_SECRET == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set, tokens are signed with the default secret")

    app = FastAPI(title="Card Boutique storefront")
    app.state.settings = settings
    app.state.store = store or JsonFileProductStore(settings.PRODUCTS_FILE)
    app.state.tokens = tokens or TokenService(settings.JWT_SECRET, settings.TOKEN_TTL_HOURS)
    app.state.relay = relay or OrderRelay(
        settings.ADMIN_EMAIL,
        sender=settings.MAIL_USER,
        transport_factory=lambda: build_transport(settings),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BoutiqueError, _boutique_error)
    app.add_exception_handler(RequestValidationError, _bad_body)
    app.add_exception_handler(Exception, _unexpected)

    # ---------------------------
    # Auth
    # ---------------------------
    @app.post("/api/login", response_model=TokenOut)
    def login(payload: Optional[LoginIn] = None,
              settings: Settings = Depends(get_app_settings),
              tokens: TokenService = Depends(get_tokens)):
        return login_logic(payload or LoginIn(), settings, tokens)

    # ---------------------------
    # Product endpoints
    # ---------------------------
    @app.get("/api/products", response_model=List[Product])
    def list_products(store: ProductStore = Depends(get_store)):
        return list_products_logic(store)

    @app.post("/api/products", response_model=Product, status_code=201)
    def create_product(payload: Optional[ProductIn] = None,
                       admin: str = Depends(require_admin),
                       store: ProductStore = Depends(get_store)):
        return create_product_logic(payload or ProductIn(), store)

    @app.put("/api/products/{product_id}", response_model=Product)
    def update_product(product_id: str,
                       payload: Optional[ProductUpdate] = None,
                       admin: str = Depends(require_admin),
                       store: ProductStore = Depends(get_store)):
        return update_product_logic(product_id, payload or ProductUpdate(), store)

    @app.delete("/api/products/{product_id}", response_model=DeleteOut)
    def delete_product(product_id: str,
                       admin: str = Depends(require_admin),
                       store: ProductStore = Depends(get_store)):
        return delete_product_logic(product_id, store)

    # ---------------------------
    # Orders
    # ---------------------------
    @app.post("/api/orders", response_model=SuccessOut)
    def place_order(payload: Optional[OrderIn] = None, relay: OrderRelay = Depends(get_relay)):
        return place_order_logic(payload or OrderIn(), relay)

    @app.get("/health")
    def healthcheck():
        return {"status": "ok"}

    # ---------------------------
    # Static site and SPA shell (registered last so the API wins)
    # ---------------------------
    static_root = Path(settings.STATIC_DIR).resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    def spa_fallback(full_path: str):
        if full_path:
            candidate = (static_root / full_path).resolve()
            if candidate.is_relative_to(static_root) and candidate.is_file():
                return FileResponse(candidate)
        shell = static_root / "index.html"
        if shell.is_file():
            return FileResponse(shell)
        return JSONResponse(status_code=404, content={"error": "Not found."})

    return app


app = create_app()
