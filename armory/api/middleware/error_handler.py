"""
Maps ledger exceptions to HTTP responses.

Every error leaves the service as an ``ErrorResponse`` body. ``message``
is the exception text, safe to show to a user as-is, except for
unexpected 500s, which are logged with a traceback and answered with a
generic message.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from armory.application.dto.responses import ErrorResponse
from armory.config import get_logger
from armory.core.exceptions import (
    ArmoryError,
    InsufficientStockError,
    InvalidStateTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ReferenceInUseError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Checked in order with isinstance; subclasses must precede their bases
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    InvalidStateTransitionError: status.HTTP_409_CONFLICT,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ReferenceInUseError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

HINT_MAP: dict[str, str] = {
    "ASSET_NOT_FOUND": "Check the asset ID and try GET /api/settings/assets/get to list assets.",
    "BASE_NOT_FOUND": "Check the base ID and try GET /api/settings/bases/get to list bases.",
    "PURCHASE_NOT_FOUND": "Check the purchase ID and try GET /api/purchase/getMy.",
    "TRANSFER_NOT_FOUND": "Check the transfer ID and try GET /api/transfers/getMy.",
    "ASSIGNMENT_NOT_FOUND": "Check the assignment ID and try GET /api/assign/getMy.",
    "EXPENDITURE_NOT_FOUND": "Check the expenditure ID and try GET /api/expend/getMy.",
    "INSUFFICIENT_STOCK": "Check available stock with GET /api/stocks/my.",
    "INVALID_STATE_TRANSITION": "Reload the assignment; its items may already be expended.",
    "INVALID_DATE_RANGE": "dateFrom must be on or before dateTo.",
    "PERMISSION_DENIED": "Your role does not allow this action at this base.",
    "REFERENCE_IN_USE": "Records that appear on ledger transactions cannot be deleted.",
    "VALIDATION_ERROR": "Fix the named field and resend.",
    "DATABASE_ERROR": "The ledger database rejected the operation; see server logs.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Fix the request and resend.",
    403: "Ask an administrator for access.",
    404: "Nothing exists with that ID.",
    409: "The record changed since it was loaded. Reload and retry.",
    422: "The request does not match the API schema.",
    500: "The ledger service failed; see server logs.",
}

_HTTP_CODES = {
    400: "BAD_REQUEST",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "UNPROCESSABLE_ENTITY",
}


def status_for(exc: Exception) -> int:
    return next(
        (code for exc_type, code in EXCEPTION_STATUS_MAP.items() if isinstance(exc, exc_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _body(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    hint = HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")
    content = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=hint,
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=content.model_dump(mode="json"))


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Build the error body for a domain or unexpected exception."""
    status_code = status_for(exc)
    error_code = exc.code if isinstance(exc, ArmoryError) else type(exc).__name__
    internal = status_code >= 500

    (logger.error if internal else logger.warning)(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        status_code=status_code,
        error_type=error_code,
        error=str(exc),
        traceback="".join(traceback.format_exception(exc)) if internal else None,
    )

    if internal and not isinstance(exc, ArmoryError):
        return _body(request, status_code, error_code, "Internal server error")
    return _body(request, status_code, error_code, str(exc))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line: anything the exception handlers missed becomes an error body."""

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
    """Register handlers for domain errors, request validation and HTTP errors."""

    @app.exception_handler(ArmoryError)
    async def armory_error(request: Request, exc: ArmoryError) -> JSONResponse:
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return _body(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            detail=problems,
        )

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException) -> JSONResponse:
        return _body(
            request,
            exc.status_code,
            _HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
            str(exc.detail) if exc.detail else "An error occurred",
        )
