"""API route handlers organized by domain."""

from .health import router as health_router
from .notes import router as notes_router
from .trash import router as trash_router

__all__ = ["health_router", "notes_router", "trash_router"]
