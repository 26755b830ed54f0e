"""
Error handling for the API.

Every error leaves the service in the same envelope (ErrorResponse):
``success`` is False, ``error`` is the human-readable message,
``error_code`` is machine-readable, and ``hint`` suggests what to try next.
"""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockroom.application.dto.responses import ErrorResponse
from stockroom.config import get_logger
from stockroom.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    StockroomError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Checked in order, first isinstance match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
    KeyError: status.HTTP_404_NOT_FOUND,
}

# Error codes for HTTPExceptions raised by routing itself
HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "UNPROCESSABLE_ENTITY",
}

HINT_MAP: dict[str, str] = {
    "ITEM_NOT_FOUND": "Check the item ID and try GET /api/inventory/items to list available items.",
    "BATCH_NOT_FOUND": "Check the batch ID and try GET /api/inventory/items/{item_id}/batches.",
    "CATEGORY_NOT_FOUND": "The category reference data is missing. Run migrations to seed categories.",
    "PARTIAL_CASCADE_FAILURE": "The item was deleted but some batches were not. Repeat the delete to finish.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "MIGRATION_FAILED": "Run 'python manage.py migrate-status --verify' and fix the failing migration.",
    "POOL_CLOSED": "The service is starting or shutting down. Retry shortly.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    405: "This endpoint does not accept that HTTP method.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _status_for(exc: Exception) -> int:
    return next(
        (code for exc_type, code in EXCEPTION_STATUS_MAP.items() if isinstance(exc, exc_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _error_json(
    request: Request,
    status_code: int,
    error: str,
    error_code: str,
    *,
    detail: str | None = None,
    hint: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        error_code=error_code,
        hint=hint or HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, ""),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert a domain or unexpected exception to the error envelope."""
    status_code = _status_for(exc)
    if isinstance(exc, StockroomError):
        error_code, message = exc.code, exc.message
    else:
        error_code, message = exc.__class__.__name__, str(exc)

    server_fault = status_code >= 500
    (logger.error if server_fault else logger.warning)(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        exc_info=exc if server_fault else None,
    )
    return _error_json(request, status_code, message, error_code)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catches whatever no exception handler claimed."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the envelope-producing exception handlers."""

    @app.exception_handler(StockroomError)
    async def domain_exception_handler(request: Request, exc: StockroomError) -> JSONResponse:
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = [
            f"{' -> '.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return _error_json(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Request validation failed",
            "VALIDATION_ERROR",
            detail="; ".join(errors),
            hint="Check the request body fields and types.",
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_json(
            request,
            exc.status_code,
            exc.detail if isinstance(exc.detail, str) else "An error occurred",
            HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            headers=getattr(exc, "headers", None),
        )
