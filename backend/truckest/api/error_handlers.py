"""Error Handlers — global exception handlers for the TruckEst API.

Invariants:
    - TruckEstError → its own envelope and HTTP status
    - RequestValidationError → 400 envelope with field-level details
    - SQLAlchemyError → 500 DATABASE_ERROR, no SQL in the response
    - Exception (catch-all) → never leaks internal details
    - Every error body has the same shape: {success: false, message, error: {...}}

Design Decisions:
    - Four-layer handler: domain, validation, database, catch-all
    - Kept out of main.py so the app module stays a list of registrations
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from truckest.core.errors import ErrorCategory, ErrorSeverity, TruckEstError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_truckest_error_handler(app)
    _register_validation_error_handler(app)
    _register_database_error_handler(app)
    _register_generic_error_handler(app)


def error_envelope(
    message: str, code: str, category: ErrorCategory, severity: ErrorSeverity,
) -> dict:
    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "category": category.value,
            "severity": severity.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


def _register_truckest_error_handler(app: FastAPI) -> None:

    @app.exception_handler(TruckEstError)
    async def truckest_error_handler(request: Request, exc: TruckEstError):
        """Handle all TruckEst domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"TruckEstError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "status_code": exc.http_status,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Pydantic validation errors are plain 400s."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_database_error_handler(app: FastAPI) -> None:

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            f"Database error on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "DATABASE_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_envelope(
                "A database error occurred", "DATABASE_ERROR",
                ErrorCategory.DATABASE, ErrorSeverity.CRITICAL,
            ),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_envelope(
                "An unexpected error occurred", "INTERNAL_ERROR",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ),
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    errors = exc.errors()
    first = errors[0] if errors else None
    message = (
        f"{'.'.join(str(loc) for loc in first['loc'][1:]) or 'request'}: {first['msg']}"
        if first else "Invalid request data"
    )
    body = error_envelope(
        message, "VALIDATION_ERROR",
        ErrorCategory.VALIDATION, ErrorSeverity.WARNING,
    )
    body["error"]["details"] = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in errors
    ]
    return body
