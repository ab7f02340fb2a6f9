"""
Application layer - Use cases and DTOs.

This layer orchestrates ledger rules by:
1. Defining request/response DTOs for the API contract
2. Implementing use cases that scope, check and persist transactions

Use cases are the only entry point for API handlers. Client-side state
lives in ``armory.application.client`` and is imported from there.
"""

from armory.application.dto.requests import (
    AssetRequest,
    BaseRequest,
    CreateAssignmentRequest,
    CreateExpenditureRequest,
    CreatePurchaseRequest,
    CreateTransferRequest,
    MarkExpendedRequest,
    MovementQuery,
    StockQuery,
    SummaryQuery,
    TransactionListQuery,
    UpdatePurchaseRequest,
)
from armory.application.dto.responses import (
    ErrorResponse,
    ExpenditureResponse,
    HealthResponse,
    MovementListResponse,
    StockListResponse,
    SummaryResponse,
)
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

__all__ = [
    # Request DTOs
    "AssetRequest",
    "BaseRequest",
    "CreatePurchaseRequest",
    "UpdatePurchaseRequest",
    "CreateTransferRequest",
    "CreateAssignmentRequest",
    "CreateExpenditureRequest",
    "MarkExpendedRequest",
    "StockQuery",
    "MovementQuery",
    "SummaryQuery",
    "TransactionListQuery",
    # Response DTOs
    "ExpenditureResponse",
    "StockListResponse",
    "MovementListResponse",
    "SummaryResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "RecordPurchaseUseCase",
    "UpdatePurchaseUseCase",
    "RecordTransferUseCase",
    "CreateAssignmentUseCase",
    "RecordExpenditureUseCase",
    "MarkAssignmentExpendedUseCase",
    "QueryStockUseCase",
    "QueryMovementsUseCase",
    "QuerySummaryUseCase",
    "ListTransactionsUseCase",
    "GetTransactionUseCase",
    "ManageAssetsUseCase",
    "ManageBasesUseCase",
]
