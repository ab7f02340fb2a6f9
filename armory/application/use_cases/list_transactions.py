"""List and Get Transaction Use Cases for the per-kind screens."""

import math
from dataclasses import dataclass

from armory.application.dto.requests import TransactionListQuery
from armory.application.dto.responses import (
    AssignmentListResponse,
    AssignmentResponse,
    ExpenditureListResponse,
    ExpenditureResponse,
    PurchaseListResponse,
    PurchaseResponse,
    TransferListResponse,
    TransferResponse,
)
from armory.application.use_cases.scope import can_see, require, resolve_base
from armory.config import get_settings
from armory.core.entities.access import Actor, Operation
from armory.core.entities.transaction import (
    Assignment,
    Expenditure,
    LedgerTransaction,
    TransactionKind,
)
from armory.core.exceptions import (
    AssignmentNotFoundError,
    ExpenditureNotFoundError,
    PermissionDeniedError,
    PurchaseNotFoundError,
    TransferNotFoundError,
)
from armory.core.interfaces.ledger_store import ILedgerStore
from armory.core.services.dashboard import resolve_window
from armory.core.services.inventory_ledger import in_window

_NOT_FOUND = {
    TransactionKind.PURCHASE: PurchaseNotFoundError,
    TransactionKind.TRANSFER: TransferNotFoundError,
    TransactionKind.ASSIGNMENT: AssignmentNotFoundError,
    TransactionKind.EXPENDITURE: ExpenditureNotFoundError,
}

_RESPONSES = {
    TransactionKind.PURCHASE: (PurchaseResponse, PurchaseListResponse, "purchases"),
    TransactionKind.TRANSFER: (TransferResponse, TransferListResponse, "transfers"),
    TransactionKind.ASSIGNMENT: (AssignmentResponse, AssignmentListResponse, "assignments"),
    TransactionKind.EXPENDITURE: (ExpenditureResponse, ExpenditureListResponse, "expenditures"),
}


@dataclass
class TransactionPage:
    kind: TransactionKind
    items: list[LedgerTransaction]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


class ListTransactionsUseCase:
    """Paginated list of one transaction kind for the actor's base."""

    def __init__(self, kind: TransactionKind, ledger_store: ILedgerStore | None = None):
        self.kind = kind
        self._ledger_store = ledger_store
        self._settings = get_settings()

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from armory.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, query: TransactionListQuery, actor: Actor) -> TransactionPage:
        require(actor, Operation.VIEW_MOVEMENTS)
        date_from, date_to = resolve_window(query.as_of, query.date_from, query.date_to)
        base_id = resolve_base(actor, query.base_id, required=False)

        store = await self._get_ledger_store()
        transactions = await store.list_transactions(kinds={self.kind}, base_id=base_id)
        matched = [
            txn
            for txn in transactions
            if in_window(txn.occurred_at.date(), date_from, date_to)
            and self._matches(txn, query)
        ]
        # Store order is oldest first; sorted() keeps ties in that order
        matched = sorted(
            matched,
            key=lambda txn: txn.occurred_at,
            reverse=query.sort_direction == "desc",
        )

        limit = min(
            query.limit or self._settings.api.default_page_size,
            self._settings.api.max_page_size,
        )
        start = (query.page - 1) * limit
        return TransactionPage(
            kind=self.kind,
            items=matched[start : start + limit],
            page=query.page,
            limit=limit,
            total=len(matched),
        )

    @staticmethod
    def _matches(txn: LedgerTransaction, query: TransactionListQuery) -> bool:
        if query.asset_id is not None and query.asset_id not in txn.asset_ids():
            return False
        if isinstance(txn, Assignment):
            if query.status is not None and txn.status != query.status:
                return False
            if query.assigned_to and query.assigned_to.lower() not in txn.assigned_to.lower():
                return False
        if isinstance(txn, Expenditure):
            if query.expended_by and query.expended_by.lower() not in txn.expended_by.lower():
                return False
            if query.search:
                haystack = f"{txn.expended_by} {txn.remarks or ''}".lower()
                if query.search.lower() not in haystack:
                    return False
        return True

    def to_response(self, page: TransactionPage):
        item_response, list_response, field = _RESPONSES[self.kind]
        return list_response(
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
            **{field: [item_response.from_entity(txn) for txn in page.items]},
        )


class GetTransactionUseCase:
    """Fetch one transaction of a given kind."""

    def __init__(self, kind: TransactionKind, ledger_store: ILedgerStore | None = None):
        self.kind = kind
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from armory.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, txn_id: int, actor: Actor) -> LedgerTransaction:
        require(actor, Operation.VIEW_MOVEMENTS)
        store = await self._get_ledger_store()
        getters = {
            TransactionKind.PURCHASE: store.get_purchase,
            TransactionKind.TRANSFER: store.get_transfer,
            TransactionKind.ASSIGNMENT: store.get_assignment,
            TransactionKind.EXPENDITURE: store.get_expenditure,
        }
        txn = await getters[self.kind](txn_id)
        if txn is None:
            raise _NOT_FOUND[self.kind](txn_id)
        if not can_see(actor, txn):
            raise PermissionDeniedError(actor.role.value, f"view {self.kind.value} {txn_id}")
        return txn

    def to_response(self, txn: LedgerTransaction):
        return _RESPONSES[self.kind][0].from_entity(txn)
