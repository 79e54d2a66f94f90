import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("shareit_server")


class ShareItError(Exception):
    """
    Base class for errors surfaced to the API caller.
    Each subclass maps to exactly one HTTP status.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ShareItError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(ShareItError):
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(ShareItError):
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(ShareItError):
    status_code = status.HTTP_409_CONFLICT


class AlreadyProcessedError(ShareItError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedStateError(ShareItError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnavailableItemError(ShareItError):
    status_code = status.HTTP_400_BAD_REQUEST


def format_validation_errors(exc: RequestValidationError) -> str:
    """Flattens pydantic error entries into 'field: message' pairs."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", ()) if loc not in ("body", "query", "path", "header"))
        parts.append(f"{field}: {error.get('msg')}" if field else error.get("msg", "Invalid request"))
    return ", ".join(parts) or "Invalid request"


async def shareit_error_handler(request: Request, exc: ShareItError):
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = format_validation_errors(exc)
    logger.warning(f"Validation error on {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ShareItError, shareit_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, internal_error_handler)
