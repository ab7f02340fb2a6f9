"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from armory.application.dto.requests import (
    AssetRequest,
    BaseRequest,
    CamelModel,
    CreateAssignmentRequest,
    CreateExpenditureRequest,
    CreatePurchaseRequest,
    CreateTransferRequest,
    ExpendItemRequest,
    LineItemRequest,
    MarkExpendedRequest,
    MovementQuery,
    StockQuery,
    SummaryQuery,
    TransactionListQuery,
    UpdatePurchaseRequest,
)
from armory.application.dto.responses import (
    AssetListResponse,
    AssetResponse,
    AssetSummaryResponse,
    AssignmentListResponse,
    AssignmentResponse,
    BaseListResponse,
    BaseResponse,
    DashboardTotalsResponse,
    DeleteResponse,
    ErrorResponse,
    ExpenditureListResponse,
    ExpenditureResponse,
    HealthResponse,
    LineItemResponse,
    MovementListResponse,
    MovementLogResponse,
    PurchaseListResponse,
    PurchaseResponse,
    StockListResponse,
    StockResponse,
    SummaryResponse,
    TransferListResponse,
    TransferResponse,
)

__all__ = [
    # Requests
    "CamelModel",
    "AssetRequest",
    "BaseRequest",
    "LineItemRequest",
    "CreatePurchaseRequest",
    "UpdatePurchaseRequest",
    "CreateTransferRequest",
    "CreateAssignmentRequest",
    "CreateExpenditureRequest",
    "ExpendItemRequest",
    "MarkExpendedRequest",
    # Queries
    "StockQuery",
    "MovementQuery",
    "SummaryQuery",
    "TransactionListQuery",
    # Responses
    "AssetResponse",
    "AssetListResponse",
    "BaseResponse",
    "BaseListResponse",
    "DeleteResponse",
    "LineItemResponse",
    "PurchaseResponse",
    "PurchaseListResponse",
    "TransferResponse",
    "TransferListResponse",
    "AssignmentResponse",
    "AssignmentListResponse",
    "ExpenditureResponse",
    "ExpenditureListResponse",
    "StockResponse",
    "StockListResponse",
    "MovementLogResponse",
    "MovementListResponse",
    "AssetSummaryResponse",
    "DashboardTotalsResponse",
    "SummaryResponse",
    "HealthResponse",
    "ErrorResponse",
]
