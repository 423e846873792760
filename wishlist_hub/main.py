"""
App factories for every deployable service.

    uvicorn --factory wishlist_hub.main:create_gateway_app --port 3000
    uvicorn --factory wishlist_hub.main:create_identity_app --port 3001
    uvicorn --factory wishlist_hub.main:create_wishlist_app --port 3002
    uvicorn --factory wishlist_hub.main:create_collaboration_app --port 3003
    uvicorn --factory wishlist_hub.main:create_catalog_app --port 3004
"""

from contextlib import asynccontextmanager
import logging
from typing import Callable

import httpx
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from wishlist_hub.core.config import Settings, get_settings
from wishlist_hub.core.errors import register_exception_handlers
from wishlist_hub.database import build_engine, create_db_and_tables
from wishlist_hub.gateway.clients import ServiceClients
from wishlist_hub.seed import seed_products, seed_users

# Leaf routers
from wishlist_hub.routers.users import router as users_router
from wishlist_hub.routers.products import router as products_router
from wishlist_hub.routers.wishlists import router as wishlists_router
from wishlist_hub.routers.access import router as access_router

# Gateway routers
from wishlist_hub.gateway.routers.auth import router as gateway_auth_router
from wishlist_hub.gateway.routers.catalog import router as gateway_catalog_router
from wishlist_hub.gateway.routers.wishlists import router as gateway_wishlists_router
from wishlist_hub.gateway.routers.invites import router as gateway_invites_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _create_app(service: str, settings: Settings, lifespan, **handler_kwargs) -> FastAPI:
    """
    Shared skeleton: settings on app.state, CORS, JSON error envelope and
    GET /health.
    """
    configure_logging(settings)

    app = FastAPI(
        title=f"{settings.PROJECT_NAME} ({service})",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, **handler_kwargs)

    @app.get("/health", tags=["Health"])
    def health():
        """Health check endpoint."""
        return {"status": "ok", "service": service}

    return app


# -------- Leaf services --------


def _leaf_lifespan(service: str, seeders: tuple[Callable[[Engine], int], ...] = ()):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
          - create tables
          - load demo data into empty tables (SEED_DEMO_DATA)

        Shutdown:
          - dispose the engine's connection pool
        """
        engine = app.state.engine
        logger.info("Startup (%s): creating tables on %s", service, engine.url.render_as_string())
        try:
            create_db_and_tables(engine)
        except Exception:
            logger.exception("Startup (%s): database initialisation failed", service)
            raise
        if app.state.settings.SEED_DEMO_DATA:
            for seed in seeders:
                seed(engine)
        yield
        engine.dispose()

    return lifespan


def _create_leaf_app(service: str, settings: Settings, routers, seeders=()) -> FastAPI:
    app = _create_app(service, settings, _leaf_lifespan(service, seeders))
    app.state.engine = build_engine(settings)
    for router in routers:
        app.include_router(router)
    return app


def create_identity_app(settings: Settings | None = None) -> FastAPI:
    return _create_leaf_app("identity", settings or get_settings(), [users_router], (seed_users,))


def create_catalog_app(settings: Settings | None = None) -> FastAPI:
    return _create_leaf_app("catalog", settings or get_settings(), [products_router], (seed_products,))


def create_wishlist_app(settings: Settings | None = None) -> FastAPI:
    return _create_leaf_app("wishlist", settings or get_settings(), [wishlists_router])


def create_collaboration_app(settings: Settings | None = None) -> FastAPI:
    return _create_leaf_app("collaboration", settings or get_settings(), [access_router])


# -------- Gateway --------


@asynccontextmanager
async def _gateway_lifespan(app: FastAPI):
    """
    Shutdown:
      - close the downstream HTTP clients
    """
    settings = app.state.settings
    logger.info(
        "Gateway upstreams: identity=%s catalog=%s wishlist=%s collaboration=%s",
        settings.IDENTITY_SERVICE_URL,
        settings.CATALOG_SERVICE_URL,
        settings.WISHLIST_SERVICE_URL,
        settings.COLLABORATION_SERVICE_URL,
    )
    yield
    await app.state.clients.aclose()


def create_gateway_app(
    settings: Settings | None = None,
    transports: dict[str, httpx.AsyncBaseTransport] | None = None,
) -> FastAPI:
    """
    Build the enrichment gateway.

    `transports` maps a service name ("identity", "catalog", "wishlist",
    "collaboration") to an httpx transport; tests use it to route calls
    into in-process leaf apps.
    """
    settings = settings or get_settings()
    app = _create_app(
        "gateway",
        settings,
        _gateway_lifespan,
        fallback_status=status.HTTP_502_BAD_GATEWAY,
        fallback_message="bad gateway",
    )
    app.state.clients = ServiceClients(settings, transports)

    app.include_router(gateway_auth_router)
    app.include_router(gateway_catalog_router)
    app.include_router(gateway_wishlists_router)
    app.include_router(gateway_invites_router)
    return app
