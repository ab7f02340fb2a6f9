"""Application use cases."""

from armory.application.use_cases.create_assignment import CreateAssignmentUseCase
from armory.application.use_cases.list_transactions import (
    GetTransactionUseCase,
    ListTransactionsUseCase,
    TransactionPage,
)
from armory.application.use_cases.manage_reference_data import (
    ManageAssetsUseCase,
    ManageBasesUseCase,
)
from armory.application.use_cases.mark_assignment_expended import (
    MarkAssignmentExpendedUseCase,
    MarkExpendedResult,
)
from armory.application.use_cases.query_movements import QueryMovementsUseCase
from armory.application.use_cases.query_stock import QueryStockUseCase, StockResult
from armory.application.use_cases.query_summary import QuerySummaryUseCase, SummaryResult
from armory.application.use_cases.record_expenditure import RecordExpenditureUseCase
from armory.application.use_cases.record_purchase import (
    RecordPurchaseUseCase,
    UpdatePurchaseUseCase,
)
from armory.application.use_cases.record_transfer import RecordTransferUseCase

__all__ = [
    "RecordPurchaseUseCase",
    "UpdatePurchaseUseCase",
    "RecordTransferUseCase",
    "CreateAssignmentUseCase",
    "RecordExpenditureUseCase",
    "MarkAssignmentExpendedUseCase",
    "MarkExpendedResult",
    "QueryStockUseCase",
    "StockResult",
    "QueryMovementsUseCase",
    "QuerySummaryUseCase",
    "SummaryResult",
    "ListTransactionsUseCase",
    "GetTransactionUseCase",
    "TransactionPage",
    "ManageAssetsUseCase",
    "ManageBasesUseCase",
]
