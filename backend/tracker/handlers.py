"""Central error handlers.

This is the single place that maps error kinds to HTTP statuses. Every
failure response has the shape `{"error": <kind>, "message": <text>}`.

- `TrackerError` subclasses use their own `status_code`
- request schema mismatches become `InvalidError` (400)
- `TypeError`/`ValueError` escaping a handler become 400
- database integrity violations become `ConflictError` (409)
- unknown routes become `NotFoundError` (404)
- anything else is a 500 and is logged with its stack trace
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import ConflictError, InvalidError, NotFoundError, TrackerError

logger = logging.getLogger("tracker.errors")


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI app."""
    app.add_exception_handler(TrackerError, tracker_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(TypeError, bad_input_handler)
    app.add_exception_handler(ValueError, bad_input_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def _respond(status_code: int, error: str, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message}, headers=headers)


async def tracker_error_handler(request: Request, exc: TrackerError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.name, request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.warning("%s on %s %s: %s", exc.name, request.method, request.url.path, exc.message)
    return _respond(exc.status_code, exc.name, exc.message)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        # drop the leading "body"/"query"/"path" location
        loc = [str(p) for p in err.get("loc", ())][1:] or [str(p) for p in err.get("loc", ())]
        parts.append(f"{'.'.join(loc)}: {err.get('msg')}")
    return "; ".join(parts) or "Invalid request data"


async def validation_error_handler(request: Request, exc: RequestValidationError):
    err = InvalidError(_describe_validation_errors(exc))
    logger.warning("validation error on %s %s: %s", request.method, request.url.path, err.message)
    return _respond(err.status_code, err.name, err.message)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    err = ConflictError("The change conflicts with existing data.")
    logger.warning("integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return _respond(err.status_code, err.name, err.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        err = NotFoundError(f"Route not found: {request.url.path}")
        logger.warning("%s", err.message)
        return _respond(err.status_code, err.name, err.message)
    return _respond(exc.status_code, "HTTPException", str(exc.detail), headers=getattr(exc, "headers", None))


async def bad_input_handler(request: Request, exc: Exception):
    logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc, exc_info=exc)
    return _respond(status.HTTP_400_BAD_REQUEST, type(exc).__name__, str(exc))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path, exc_info=exc)
    return _respond(status.HTTP_500_INTERNAL_SERVER_ERROR, type(exc).__name__, str(exc) or "Internal server error")
