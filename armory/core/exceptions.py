"""
Domain exceptions for the armory ledger.

Provides specific exception types for different error scenarios.
"""

from datetime import date
from typing import Any


class ArmoryError(Exception):
    """Base exception for all armory ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(ArmoryError):
    """Base exception for storage operations."""

    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            code=f"{entity.upper()}_NOT_FOUND",
            details={f"{entity}_id": entity_id},
        )


class AssetNotFoundError(NotFoundError):
    def __init__(self, asset_id: int):
        super().__init__("asset", asset_id)


class BaseNotFoundError(NotFoundError):
    def __init__(self, base_id: int):
        super().__init__("base", base_id)


class PurchaseNotFoundError(NotFoundError):
    def __init__(self, purchase_id: int):
        super().__init__("purchase", purchase_id)


class TransferNotFoundError(NotFoundError):
    def __init__(self, transfer_id: int):
        super().__init__("transfer", transfer_id)


class AssignmentNotFoundError(NotFoundError):
    def __init__(self, assignment_id: int):
        super().__init__("assignment", assignment_id)


class ExpenditureNotFoundError(NotFoundError):
    def __init__(self, expenditure_id: int):
        super().__init__("expenditure", expenditure_id)


class ReferenceInUseError(StorageError):
    """Asset or base is referenced by a ledger transaction."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(
            f"{entity.capitalize()} {entity_id} is referenced by ledger transactions",
            code="REFERENCE_IN_USE",
            details={"entity": entity, "entity_id": entity_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Ledger Exceptions
class LedgerError(ArmoryError):
    """Base exception for ledger rule violations."""

    pass


class InvalidStateTransitionError(LedgerError):
    """Assignment cannot move to the requested state."""

    def __init__(self, assignment_id: int | None, reason: str):
        super().__init__(
            f"Invalid state transition for assignment {assignment_id}: {reason}",
            code="INVALID_STATE_TRANSITION",
            details={"assignment_id": assignment_id, "reason": reason},
        )


class InsufficientStockError(LedgerError):
    """Not enough unassigned stock at the base."""

    def __init__(
        self,
        base_id: int,
        asset_id: int,
        requested: int,
        available: int,
        as_of: date | None = None,
    ):
        when = f" on {as_of.isoformat()}" if as_of else ""
        super().__init__(
            f"Insufficient stock for asset {asset_id} at base {base_id}{when}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "base_id": base_id,
                "asset_id": asset_id,
                "requested": requested,
                "available": available,
                "as_of": as_of.isoformat() if as_of else None,
            },
        )


class PermissionDeniedError(ArmoryError):
    """Role is not allowed to perform the operation."""

    def __init__(self, role: str, operation: str):
        super().__init__(
            f"Role '{role}' may not {operation.replace('_', ' ')}",
            code="PERMISSION_DENIED",
            details={"role": role, "operation": operation},
        )


# Validation Exceptions
class ValidationError(ArmoryError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidDateRangeError(ValidationError):
    """dateFrom falls after dateTo."""

    def __init__(self, date_from: Any, date_to: Any):
        super().__init__(
            field="dateFrom",
            message=f"dateFrom {date_from} is after dateTo {date_to}",
        )
        self.code = "INVALID_DATE_RANGE"
        self.details.update({"date_from": str(date_from), "date_to": str(date_to)})


# Client Exceptions
class ClientError(ArmoryError):
    """Base exception for ledger API client failures."""

    retryable = False


class TransportFailureError(ClientError):
    """Request never reached the server or no response came back."""

    retryable = True

    def __init__(self, method: str, path: str, reason: str):
        super().__init__(
            f"Could not reach the ledger service ({method} {path}): {reason}",
            code="TRANSPORT_FAILURE",
            details={"method": method, "path": path, "reason": reason},
        )


class ApiRejectedError(ClientError):
    """Server answered with a non-2xx status.

    ``message`` is the server's own text, ready to show to the user.
    """

    def __init__(self, status_code: int, message: str, path: str):
        super().__init__(
            message,
            code="API_REJECTED",
            details={"status_code": status_code, "path": path},
        )
        self.status_code = status_code


class MalformedResponseError(ClientError):
    """Server answered 2xx but the body is not the expected JSON shape."""

    def __init__(self, method: str, path: str, reason: str):
        super().__init__(
            f"Unreadable response from the ledger service ({method} {path})",
            code="MALFORMED_RESPONSE",
            details={"method": method, "path": path, "reason": reason[:200]},
        )
