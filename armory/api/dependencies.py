"""
Dependency injection container for FastAPI.

Provides the calling actor and use case instances to route handlers.
"""

from collections.abc import Callable
from typing import TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from armory.application.use_cases import (
    CreateAssignmentUseCase,
    GetTransactionUseCase,
    ListTransactionsUseCase,
    ManageAssetsUseCase,
    ManageBasesUseCase,
    MarkAssignmentExpendedUseCase,
    QueryMovementsUseCase,
    QueryStockUseCase,
    QuerySummaryUseCase,
    RecordExpenditureUseCase,
    RecordPurchaseUseCase,
    RecordTransferUseCase,
    UpdatePurchaseUseCase,
)
from armory.config import get_settings
from armory.core.entities.access import Actor, Role
from armory.core.entities.transaction import TransactionKind
from armory.core.exceptions import ValidationError

QueryT = TypeVar("QueryT", bound=BaseModel)


# Actor
def get_actor(request: Request) -> Actor:
    """
    Build the calling actor from the gateway headers.

    Missing headers give the least privileged actor.
    """
    api = get_settings().api
    name = request.headers.get(api.user_header) or "anonymous"

    raw_role = request.headers.get(api.role_header) or Role.USER.value
    try:
        role = Role(raw_role.strip().lower())
    except ValueError:
        raise ValidationError(api.role_header, "unknown role", raw_role) from None

    raw_base = request.headers.get(api.base_header)
    base_id = None
    if raw_base:
        try:
            base_id = int(raw_base)
        except ValueError:
            raise ValidationError(api.base_header, "must be an integer", raw_base) from None

    return Actor(name=name, role=role, base_id=base_id)


# Query string models
def query_params(model: type[QueryT]) -> Callable[[Request], QueryT]:
    """Dependency that validates the query string against a camelCase model."""

    def dependency(request: Request) -> QueryT:
        try:
            return model.model_validate(dict(request.query_params))
        except PydanticValidationError as e:
            raise RequestValidationError(e.errors(include_url=False)) from e

    return dependency


# Reference data use cases
def get_manage_assets_use_case() -> ManageAssetsUseCase:
    """Get asset catalogue use case."""
    return ManageAssetsUseCase()


def get_manage_bases_use_case() -> ManageBasesUseCase:
    """Get base management use case."""
    return ManageBasesUseCase()


# Transaction use cases
def get_record_purchase_use_case() -> RecordPurchaseUseCase:
    return RecordPurchaseUseCase()


def get_update_purchase_use_case() -> UpdatePurchaseUseCase:
    return UpdatePurchaseUseCase()


def get_record_transfer_use_case() -> RecordTransferUseCase:
    return RecordTransferUseCase()


def get_create_assignment_use_case() -> CreateAssignmentUseCase:
    return CreateAssignmentUseCase()


def get_record_expenditure_use_case() -> RecordExpenditureUseCase:
    return RecordExpenditureUseCase()


def get_mark_expended_use_case() -> MarkAssignmentExpendedUseCase:
    """Get assignment fulfillment use case."""
    return MarkAssignmentExpendedUseCase()


def list_transactions(kind: TransactionKind) -> Callable[[], ListTransactionsUseCase]:
    """Dependency factory for a per-kind list use case."""

    def dependency() -> ListTransactionsUseCase:
        return ListTransactionsUseCase(kind)

    return dependency


def get_transaction(kind: TransactionKind) -> Callable[[], GetTransactionUseCase]:
    """Dependency factory for a per-kind get use case."""

    def dependency() -> GetTransactionUseCase:
        return GetTransactionUseCase(kind)

    return dependency


# View use cases
def get_query_stock_use_case() -> QueryStockUseCase:
    """Get stock view use case."""
    return QueryStockUseCase()


def get_query_movements_use_case() -> QueryMovementsUseCase:
    """Get movement log use case."""
    return QueryMovementsUseCase()


def get_query_summary_use_case() -> QuerySummaryUseCase:
    """Get dashboard summary use case."""
    return QuerySummaryUseCase()
