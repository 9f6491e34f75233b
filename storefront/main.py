from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from shared.utils import (
    HealthResponse, Settings, register_exception_handlers, settings as default_settings
)
from shared.logging_config import setup_logging, RequestLoggingMiddleware
from shared.security_config import setup_rate_limiting, SecurityHeadersMiddleware

from storefront import __version__
from storefront.cart_store import CartStore
from storefront.catalog import Catalog
from storefront.checkout import CheckoutService
from storefront.order_store import OrderStore
from storefront.pricing import PricingPolicy
from storefront.routers import ROUTERS
from storefront.user_store import UserStore


def init_state(app: FastAPI, config: Settings):
    """Build the per-application stores; nothing is shared between app instances."""
    catalog = Catalog()
    cart_store = CartStore(catalog)
    order_store = OrderStore()

    app.state.catalog = catalog
    app.state.cart_store = cart_store
    app.state.order_store = order_store
    app.state.checkout_service = CheckoutService(
        catalog, cart_store, order_store, PricingPolicy.from_settings(config)
    )
    app.state.user_store = UserStore(config.USERS_FILE).load()


def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or default_settings
    logger = setup_logging(config.SERVICE_NAME, config.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_state(app, config)
        logger.info(
            f"Storefront started on port {config.PORT}: "
            f"{len(app.state.catalog)} products, {len(app.state.user_store)} users"
        )
        yield
        logger.info(f"Storefront shutting down with {len(app.state.order_store)} orders in memory")

    app = FastAPI(title="ShopHub Storefront", version=__version__, lifespan=lifespan)
    app.state.settings = config

    # Security Setup
    setup_rate_limiting(app)
    app.add_middleware(SecurityHeadersMiddleware)

    # Middleware
    app.add_middleware(RequestLoggingMiddleware, service_name=config.SERVICE_NAME)

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router, prefix="/api")

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check(request: Request):
        state = request.app.state
        return HealthResponse(
            service=config.SERVICE_NAME,
            status="healthy",
            timestamp=datetime.now(timezone.utc),
            version=__version__,
            dependencies={
                "catalog": f"{len(state.catalog)} products",
                "users": f"{len(state.user_store)} users",
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
