"""
Error envelope for every failed request.

Body fields:
- error_code: machine-readable identifier (e.g. INSUFFICIENT_STOCK)
- message: human-readable description
- hint: what the caller can do about it
- detail: structured context of the failure, JSON encoded
- path: request path
"""

import json
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    ConfigurationError,
    DuplicateSkuError,
    InvalidInputError,
    NoConsumptionError,
    NotFoundError,
    StockControlError,
    StockRuleError,
    StorageError,
)

logger = get_logger(__name__)


# First match wins: NoConsumptionError is a StockRuleError but answers 400
STATUS_BY_EXCEPTION: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (NoConsumptionError, status.HTTP_400_BAD_REQUEST),
    (StockRuleError, status.HTTP_409_CONFLICT),
    (DuplicateSkuError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ValueError, status.HTTP_400_BAD_REQUEST),
)

HINTS: dict[str, str] = {
    "PRODUCT_NOT_FOUND": "Check the product ID and try GET /api/products to list products.",
    "MOVEMENT_NOT_FOUND": "Check the movement ID and try GET /api/movements to list movements.",
    "SUPPLIER_NOT_FOUND": "Check the supplier ID and try GET /api/suppliers to list suppliers.",
    "VENDOR_NOT_FOUND": "Check the vendor ID and try GET /api/vendors to list vendors.",
    "INVALID_INPUT": "Quantities must be greater than zero and costs cannot be negative.",
    "INSUFFICIENT_STOCK": "Record an entry first or reduce the quantity.",
    "NEGATIVE_STOCK_REJECTED": "Later exits already used this stock. Correct those movements first.",
    "NO_CONSUMPTION": "Everything that left came back; nothing needs to be recorded.",
    "DUPLICATE_SKU": "SKU generation collided repeatedly. Retry the request.",
    "NESTED_TRANSACTION": "A stock transaction was opened inside another one. Check server logs.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

FALLBACK_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    405: "This path does not accept that method.",
    409: "The request conflicts with the current stock. Refresh and retry.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}

HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "UNPROCESSABLE_ENTITY",
}


def status_for(exc: Exception) -> int:
    return next(
        (code for exc_type, code in STATUS_BY_EXCEPTION if isinstance(exc, exc_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _envelope(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=HINTS.get(error_code) or FALLBACK_HINTS.get(status_code, ""),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Answer a domain or unexpected exception."""
    status_code = status_for(exc)

    if isinstance(exc, StockControlError):
        error_code, message = exc.code, exc.message
        detail = json.dumps(exc.details, default=str) if exc.details else None
    else:
        error_code, message, detail = type(exc).__name__, str(exc), None

    if status_code >= 500:
        logger.error(
            "request_errored",
            path=request.url.path,
            error_code=error_code,
            error=str(exc),
            exc_info=exc,
        )
    else:
        logger.info("request_rejected", path=request.url.path, error_code=error_code, status=status_code)

    return _envelope(request, status_code, error_code, message, detail)


async def handle_domain_error(request: Request, exc: StockControlError) -> JSONResponse:
    return error_response(request, exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{' -> '.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return _envelope(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        problems,
    )


async def handle_http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return _envelope(
        request,
        exc.status_code,
        HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        str(exc.detail or "An error occurred"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no handler claimed."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StockControlError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_error)
