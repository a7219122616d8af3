"""Service info and liveness endpoints."""

import structlog
from fastapi import APIRouter

from .. import config
from ..database import Database

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/")
async def root():
    """Describe where the notes and trash resources live."""
    logger.debug("service_info_requested")
    return {
        "service": "notekeeper-api",
        "notes": f"{config.API_PREFIX}/notes",
        "trash": f"{config.API_PREFIX}/trash",
    }


@router.get("/health")
async def health():
    """Liveness plus whether the note store has a database connection."""
    database = "connected" if Database.db is not None else "disconnected"
    logger.debug("health_check_requested", database=database)
    return {"status": "healthy", "service": "notekeeper-api", "database": database}
