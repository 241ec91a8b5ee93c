"""BoothBoss API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BoothBossError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Every non-probe request is access-logged with status and duration
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan (not @app.on_event) owns logging setup and the database manager
    - Local media is served by a StaticFiles mount at /<local_upload_path>, matching
      the URLs LocalStorageProvider hands out; check_dir=False so the directory
      may be created by the first upload
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from boothboss.api.error_handlers import register_error_handlers
from boothboss.api.routes import (
    account, admin, analytics, auth, booth, dev_emails, event_urls, health,
    journeys, sessions, settings as settings_routes, subscription, uploads,
)
from boothboss.config import get_settings
from boothboss.infrastructure.database import close_db, init_db
from boothboss.infrastructure.observability import log_request, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"BoothBoss API started ({settings.environment})")
    yield
    await close_db()
    logger.info("BoothBoss API shutting down")


app = FastAPI(
    title="BoothBoss API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_request)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(account.router)
app.include_router(event_urls.router)
app.include_router(settings_routes.router)
app.include_router(journeys.router)
app.include_router(booth.router)
app.include_router(analytics.router)
app.include_router(sessions.router)
app.include_router(subscription.router)
app.include_router(uploads.router)
app.include_router(admin.router)
app.include_router(dev_emails.router)

register_error_handlers(app)

# Mounted after API routes so /api/v1/* takes precedence
_upload_prefix = settings.local_upload_path.strip("/") or "uploads"
app.mount(
    f"/{_upload_prefix}",
    StaticFiles(directory=Path(settings.public_dir) / _upload_prefix, check_dir=False),
    name="uploads",
)
