"""API middleware."""

from armory.api.middleware.error_handler import ErrorHandlerMiddleware
from armory.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
