"""Card Preview API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CardPreviewError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Process-wide resources (DB pool, HTTP client, font cache) created in lifespan
      and released on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Font cache lives for the whole process: populated on first render, never evicted
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardpreview.api.error_handlers import register_error_handlers
from cardpreview.api.routes import health, preview_image
from cardpreview.config import get_settings
from cardpreview.infrastructure.database import init_db
from cardpreview.infrastructure.font_cache import FontCache, font_sources
from cardpreview.infrastructure.http_client import build_async_client
from cardpreview.infrastructure.image_inliner import ImageInliner
from cardpreview.infrastructure.observability import setup_logging

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
    client = build_async_client(settings)
    app.state.font_cache = FontCache(
        client, font_sources(settings),
        timeout_seconds=settings.font_fetch_timeout_seconds,
    )
    app.state.image_inliner = ImageInliner(
        client,
        timeout_seconds=settings.photo_fetch_timeout_seconds,
        max_bytes=settings.photo_max_bytes,
    )
    logger.info("Card Preview API started")
    yield
    logger.info("Card Preview API shutting down")
    await client.aclose()
    await manager.dispose()


app = FastAPI(
    title="Card Preview API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(preview_image.router)

register_error_handlers(app)
