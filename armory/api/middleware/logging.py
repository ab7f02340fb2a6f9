"""Request logging: one id per request, bound into every log line it causes."""

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from armory.config import get_logger, get_settings

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags the request with an 8-character id and the gateway actor.

    The id is bound with structlog contextvars, so use case and store log
    lines for the same request carry it too. It is echoed back in
    ``X-Request-ID`` together with ``X-Response-Time``.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        headers = get_settings().api

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            actor=request.headers.get(headers.user_header),
            role=request.headers.get(headers.role_header),
        )
        logger.info("request_started", method=request.method, path=request.url.path)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.info(
            "request_completed",
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(elapsed_ms, 2),
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        return response
