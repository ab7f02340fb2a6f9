"""Infrastructure layer implementations."""

from armory.infrastructure import http, storage

__all__ = ["storage", "http"]
