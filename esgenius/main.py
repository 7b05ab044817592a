"""
ESGenius — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from esgenius.api.api import api_router
from esgenius.api.endpoints.auth import limiter
from esgenius.core.config import settings
from esgenius.core.exceptions import register_exception_handlers
from esgenius.core.logging import configure_logging
from esgenius.db.session import async_session_factory, engine, init_models
from esgenius.services.provisioning import ensure_first_admin

configure_logging()
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    await init_models()
    logger.info("Database tables initialised")

    # Seed default admin user on first run
    async with async_session_factory() as session:
        result = await ensure_first_admin(
            session, settings.FIRST_ADMIN_EMAIL, settings.FIRST_ADMIN_PASSWORD
        )
        if result.outcome == "created":
            logger.info("Default admin created: %s (password: <redacted>)", result.email)

    logger.info("🚀 %s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="ESG reporting API",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting (slowapi reads the limiter from app state)
    application.state.limiter = limiter

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)
    return application


app = create_app()
