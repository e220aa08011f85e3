"""Application errors and the shared translation of errors into JSON responses."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """Base class for errors that carry an HTTP status code."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DatabaseError(AppError):
    """Raised when the store rejects or fails an operation."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(f"Database Error: {message}", status_code)


class ValidationError(AppError):
    """Raised when input data fails validation; details map field -> message."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message, 400)
        self.details = details or {}


class FileUploadError(AppError):
    """Raised when an uploaded file is missing, too large, of the wrong type or unreadable."""

    def __init__(self, message: str) -> None:
        super().__init__(f"File Upload Error: {message}", 400)


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str, resource_id: str | int | None = None) -> None:
        if resource_id is not None:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message, 404)


def log_error(error: BaseException, context: str | None = None) -> None:
    """Log an error with an optional [context] tag; tracebacks only at DEBUG level."""
    if context:
        logger.error("[%s] %s: %s", context, type(error).__name__, error)
    else:
        logger.error("%s: %s", type(error).__name__, error)
    logger.debug("Traceback:", exc_info=error)


def handle_api_error(error: BaseException) -> JSONResponse:
    """Translate an exception into the API's JSON error response."""
    logger.error("API Error: %s", error)
    if isinstance(error, AppError):
        body: dict = {"error": error.message}
        if isinstance(error, ValidationError):
            body["details"] = error.details
        return JSONResponse(status_code=error.status_code, content=body)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """FastAPI exception handler for AppError raised from route handlers."""
    return handle_api_error(exc)
