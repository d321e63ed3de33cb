"""Exception handlers producing the uniform error body"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas import ErrorResponse
from core.errors import SessionNotFoundError, StorageError
from core.utils import utcnow

logger = logging.getLogger(__name__)


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    """Build a {statusCode, timestamp, path, message} response"""
    body = ErrorResponse(
        status_code=status_code,
        timestamp=utcnow(),
        path=request.url.path,
        message=message,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Validation failed"


async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
    return error_response(request, 404, str(exc))


async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return error_response(request, 500, "Internal server error")


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(request, 400, _format_validation_errors(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(request, 500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all handlers to the application"""
    app.add_exception_handler(SessionNotFoundError, session_not_found_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
