"""HTTP client for the ledger service."""

from armory.infrastructure.http.client import ArmoryApiClient, error_message

__all__ = ["ArmoryApiClient", "error_message"]
