"""Stream Ledger API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StreamLedgerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and custody client initialized on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - SQLite databases get their tables created on startup; server databases
      are migrated with Alembic
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from streamledger.api.dependencies import close_custody_client, init_custody_client
from streamledger.api.error_handlers import register_error_handlers
from streamledger.api.routes import health, ledger, streams
from streamledger.config import get_settings
from streamledger.infrastructure.database import init_db
from streamledger.infrastructure.observability import setup_logging

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
    if settings.database_url.startswith("sqlite"):
        await manager.create_all()
    init_custody_client(settings)
    logger.info(
        f"Stream ledger API started (custody={settings.custody_mode})",
    )
    yield
    await close_custody_client()
    await manager.dispose()
    logger.info("Stream ledger API shutting down")


app = FastAPI(
    title="Stream Ledger API", version="0.1.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(streams.router)
app.include_router(ledger.router)

register_error_handlers(app)
