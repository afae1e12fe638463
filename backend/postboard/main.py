"""Postboard API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PostboardError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Every response carries X-Request-ID for log correlation
    - Database initialized on startup via lifespan context manager, disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Stored images served from /images: the upload route returns paths under it
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from postboard.api.error_handlers import register_error_handlers
from postboard.api.routes import health, operations, post_image
from postboard.config import get_settings
from postboard.infrastructure.database import init_db
from postboard.infrastructure.observability import RequestIdMiddleware, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Postboard API started")
    yield
    await manager.dispose()
    logger.info("Postboard API shutting down")


app = FastAPI(title="Postboard API", version="1.0.0", lifespan=lifespan)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["OPTIONS", "GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(RequestIdMiddleware)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(operations.router)
app.include_router(post_image.router)

register_error_handlers(app)

# Stored images — check_dir=False: the directory is created on first upload
app.mount(
    "/images",
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="images",
)
