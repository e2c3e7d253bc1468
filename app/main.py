"""FastAPI application factory — entry point for Kuuburi."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from app.api.routes.auth import router as auth_router
from app.api.routes.books import router as books_router
from app.api.routes.view import router as view_router
from app.config import DEFAULT_SESSION_SECRET, Settings, settings
from app.services.sessions import SessionRegistry
from app.wiring import build_auth, build_store

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan: connect adapters, then release them."""
        logger.info("Kuuburi starting up...")
        logger.info("Store backend: %s", config.store_backend.value)
        logger.info("Auth provider: %s", config.auth_provider.value)
        if config.session_secret == DEFAULT_SESSION_SECRET:
            logger.warning("SESSION_SECRET is not set; session cookies use the default key")
        store = await build_store(config)
        app.state.settings = config
        app.state.store = store
        app.state.auth = build_auth(config)
        app.state.registry = SessionRegistry(
            store,
            max_sessions=config.max_sessions,
            idle_seconds=config.session_idle_seconds,
        )
        yield
        await store.close()
        logger.info("Kuuburi shutting down...")

    application = FastAPI(
        title="Kuuburi",
        description="Book recommendations: browse, search, like and share books",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ── Middleware ──────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret,
        session_cookie=config.session_cookie,
    )

    # ── Routes ─────────────────────────────────────
    application.include_router(auth_router)
    application.include_router(books_router)
    application.include_router(view_router)

    # ── Health Check ───────────────────────────────
    @application.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "kuuburi"}

    return application


app = create_app()
