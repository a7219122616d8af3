"""FastAPI application for Notekeeper."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from . import config
from .database import Database
from .exceptions import register_exception_handlers
from .observability import initialize_observability
from .routes import health_router, notes_router, trash_router

# Initialize logger
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("api_starting")

    initialize_observability()

    await Database.connect()
    logger.info("api_started", prefix=config.API_PREFIX)

    yield

    logger.info("api_shutting_down")
    await Database.disconnect()
    logger.info("api_shutdown_complete")


app = FastAPI(
    title="Notekeeper API",
    description="Personal notes with trash, importance flags, search and sorting",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Instrument FastAPI with OpenTelemetry
FastAPIInstrumentor.instrument_app(app)

# Include routers
app.include_router(health_router)
app.include_router(notes_router, prefix=config.API_PREFIX)
app.include_router(trash_router, prefix=config.API_PREFIX)
