"""Uniform error envelopes for every route.

    malformed input          -> 400 {success: false, error}
    duplicate entry          -> 409 {success: false, error}
    HTTPException (404, ...) -> its status, {success: false, error}
    any other failure        -> 500 {success: false, error: "Internal server error"}
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from squidmarket.core.exceptions import (
    DuplicateEntryError,
    SquidMarketError,
    ValidationError,
)

log = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def _validation_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def _duplicate_handler(_request: Request, exc: DuplicateEntryError) -> JSONResponse:
    log.info("duplicate_entry_rejected", table=exc.table)
    return error_response(status.HTTP_409_CONFLICT, f"Entry already exists in {exc.table}")


async def _http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def _internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
        exc_info=exc,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error envelope handlers on ``app``."""
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValidationError, _validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DuplicateEntryError, _duplicate_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SquidMarketError, _internal_error_handler)
    app.add_exception_handler(Exception, _internal_error_handler)
