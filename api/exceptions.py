"""Application exceptions and their FastAPI handlers."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class NotekeeperError(Exception):
    """Base exception for all note store errors."""

    status_code = 500

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(NotekeeperError):
    """Raised when a required field or confirmation flag is missing."""

    status_code = 400

    def __init__(self, message: str = "Validation failed") -> None:
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class NoteNotFoundError(NotekeeperError):
    """Raised when an operation references a nonexistent note id."""

    status_code = 404

    def __init__(self, note_id: int | None = None) -> None:
        self.note_id = note_id
        super().__init__("Note not found", code="RES_NOT_FOUND")


class StoreUnavailableError(NotekeeperError):
    """Raised when the backing database cannot serve a request."""

    status_code = 500

    def __init__(self, message: str = "Note store unavailable") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")


async def notekeeper_error_handler(request: Request, exc: NotekeeperError) -> JSONResponse:
    """Convert store exceptions to `{"detail": ...}` responses."""
    log_fields = {
        "code": exc.code,
        "message": exc.message,
        "status": exc.status_code,
        "path": request.url.path,
        "method": request.method,
    }
    if exc.status_code >= 500:
        logger.error("request_failed", **log_fields)
    else:
        logger.warning("request_rejected", **log_fields)

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies and parameters as 400s."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(loc) for loc in first.get("loc", ()) if loc != "body")
        message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg")
    else:
        message = "Invalid request"

    logger.warning(
        "request_validation_failed",
        path=request.url.path,
        method=request.method,
        error_count=len(errors),
    )
    return JSONResponse(status_code=400, content={"detail": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to an application."""
    app.add_exception_handler(NotekeeperError, notekeeper_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
