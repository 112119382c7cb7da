"""Effect Service API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map EffectServiceError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - Stored images served read-only under settings.image_url_path

Design Decisions:
    - Lifespan over @app.on_event: cleaner cleanup
    - The instance identifier comes from settings; the service never resolves its own host
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

import effect_service.infrastructure.database as database
from effect_service.api.error_handlers import register_error_handlers
from effect_service.api.routes import effects, health
from effect_service.config import get_settings
from effect_service.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    Path(settings.image_path).mkdir(parents=True, exist_ok=True)
    logger.info(
        "Effect service started",
        extra={"instance": settings.service_instance},
    )
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info(
        "Effect service shutting down",
        extra={"instance": settings.service_instance},
    )


app = FastAPI(
    title="Effect Service API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(effects.router)

app.mount(
    settings.image_url_path.rstrip("/"),
    StaticFiles(directory=settings.image_path, check_dir=False),
    name="effect-images",
)

register_error_handlers(app)
