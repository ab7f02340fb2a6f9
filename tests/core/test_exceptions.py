"""Tests for domain exceptions."""

from datetime import date

from armory.core.exceptions import (
    ApiRejectedError,
    ArmoryError,
    AssignmentNotFoundError,
    InsufficientStockError,
    InvalidDateRangeError,
    NotFoundError,
    TransportFailureError,
    ValidationError,
)


def test_default_code_is_class_name():
    assert ArmoryError("boom").code == "ArmoryError"


def test_to_dict():
    error = ArmoryError("boom", code="X", details={"a": 1})
    assert error.to_dict() == {"error": "X", "message": "boom", "details": {"a": 1}}


def test_not_found_code():
    error = AssignmentNotFoundError(7)
    assert isinstance(error, NotFoundError)
    assert error.code == "ASSIGNMENT_NOT_FOUND"
    assert error.details == {"assignment_id": 7}


def test_insufficient_stock_details():
    error = InsufficientStockError(base_id=1, asset_id=2, requested=10, available=3)
    assert error.details["available"] == 3
    assert "requested 10, available 3" in error.message


def test_invalid_range_is_validation_error():
    error = InvalidDateRangeError(date(2025, 2, 1), date(2025, 1, 1))
    assert isinstance(error, ValidationError)
    assert error.code == "INVALID_DATE_RANGE"
    assert error.details["date_to"] == "2025-01-01"


def test_validation_value_truncated():
    assert len(ValidationError("f", "bad", "x" * 500).details["value"]) == 100


def test_client_errors_retryable_flag():
    assert TransportFailureError("GET", "/api/health", "refused").retryable
    rejected = ApiRejectedError(409, "Assignment already expended", "/api/expend/x")
    assert not rejected.retryable
    assert rejected.message == "Assignment already expended"
    assert rejected.status_code == 409
