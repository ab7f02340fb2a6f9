"""
Inventory ledger replay and windowed reconciliation.

Layer-pure service. Stock is never stored: every snapshot comes from
replaying transactions in business-date order up to a cutoff, so an
"as of" query is a point-in-time replay rather than a live value.
"""

from collections.abc import Iterable
from datetime import date
from itertools import groupby

from armory.core.entities.inventory import AssetSummary, InventoryStock
from armory.core.entities.transaction import (
    Assignment,
    Expenditure,
    LedgerTransaction,
    Purchase,
    TransactionKind,
    Transfer,
)
from armory.core.exceptions import InsufficientStockError

_KIND_ORDER = {
    TransactionKind.PURCHASE: 0,
    TransactionKind.TRANSFER: 1,
    TransactionKind.ASSIGNMENT: 2,
    TransactionKind.EXPENDITURE: 3,
}


def ledger_order(txn: LedgerTransaction) -> tuple:
    """Sort key: business date, then creation order."""
    return (txn.occurred_at, txn.created_at, _KIND_ORDER[txn.kind], txn.id or 0)


def touches_base(txn: LedgerTransaction, base_id: int) -> bool:
    if isinstance(txn, Transfer):
        return base_id in (txn.from_base_id, txn.to_base_id)
    return txn.base_id == base_id


def in_window(day: date, date_from: date | None, date_to: date | None) -> bool:
    """Inclusive calendar-date window; a missing bound is open."""
    if date_from is not None and day < date_from:
        return False
    if date_to is not None and day > date_to:
        return False
    return True


class InventoryLedger:
    """Per (base, asset) stock built by replaying transactions."""

    def __init__(self) -> None:
        self._stocks: dict[tuple[int, int], InventoryStock] = {}

    @classmethod
    def replay(
        cls,
        transactions: Iterable[LedgerTransaction],
        until: date | None = None,
        before: date | None = None,
    ) -> "InventoryLedger":
        """
        Build a ledger from transactions.

        Args:
            transactions: Transactions in any order
            until: Include transactions dated on or before this day
            before: Include transactions dated strictly before this day
        """
        ledger = cls()
        for txn in sorted(transactions, key=ledger_order):
            day = txn.occurred_at.date()
            if until is not None and day > until:
                continue
            if before is not None and day >= before:
                continue
            ledger.apply(txn)
        return ledger

    def _entry(self, base_id: int, asset_id: int) -> InventoryStock:
        key = (base_id, asset_id)
        if key not in self._stocks:
            self._stocks[key] = InventoryStock(base_id=base_id, asset_id=asset_id)
        return self._stocks[key]

    def apply(self, txn: LedgerTransaction) -> None:
        """Apply one transaction's effect on the counters."""
        if isinstance(txn, Purchase):
            for item in txn.items:
                stock = self._entry(txn.base_id, item.asset_id)
                stock.purchased += item.quantity
                stock.quantity += item.quantity
        elif isinstance(txn, Transfer):
            for item in txn.items:
                source = self._entry(txn.from_base_id, item.asset_id)
                source.transferred_out += item.quantity
                source.quantity -= item.quantity
                target = self._entry(txn.to_base_id, item.asset_id)
                target.transferred_in += item.quantity
                target.quantity += item.quantity
        elif isinstance(txn, Assignment):
            # Assigned stock stays on the books until it is expended
            for item in txn.items:
                self._entry(txn.base_id, item.asset_id).assigned += item.quantity
        elif isinstance(txn, Expenditure):
            for item in txn.items:
                stock = self._entry(txn.base_id, item.asset_id)
                stock.expended += item.quantity
                stock.quantity -= item.quantity
                if txn.assignment_id is not None:
                    stock.assigned -= item.quantity
        else:
            raise TypeError(f"Unknown transaction type: {type(txn).__name__}")

    def stock(self, base_id: int, asset_id: int) -> InventoryStock:
        """Snapshot for a pair; zeroes when the pair never moved."""
        found = self._stocks.get((base_id, asset_id))
        if found is None:
            return InventoryStock(base_id=base_id, asset_id=asset_id)
        return found.model_copy()

    def stocks_for_base(self, base_id: int) -> list[InventoryStock]:
        return [
            stock.model_copy()
            for (stock_base, _), stock in sorted(self._stocks.items())
            if stock_base == base_id
        ]

    def all_stocks(self) -> list[InventoryStock]:
        return [stock.model_copy() for _, stock in sorted(self._stocks.items())]

    def require_available(
        self,
        base_id: int,
        quantities: dict[int, int],
        as_of: date | None = None,
    ) -> None:
        """Raise if any asset lacks enough unassigned stock at the base."""
        for asset_id, requested in sorted(quantities.items()):
            available = self.stock(base_id, asset_id).available
            if requested > available:
                raise InsufficientStockError(
                    base_id=base_id,
                    asset_id=asset_id,
                    requested=requested,
                    available=max(available, 0),
                    as_of=as_of,
                )


def reconcile_window(
    transactions: Iterable[LedgerTransaction],
    base_id: int,
    date_from: date | None = None,
    date_to: date | None = None,
    asset_ids: set[int] | None = None,
) -> list[AssetSummary]:
    """
    Windowed ledger per asset for one base.

    ``openingBalance`` is the replayed quantity just before ``date_from``.
    Assets without a transaction at the base inside the window are omitted,
    so callers must not assume every known asset appears.
    """
    transactions = list(transactions)
    opening = InventoryLedger.replay(transactions, before=date_from) if date_from else None

    rows: dict[int, AssetSummary] = {}

    def row(asset_id: int) -> AssetSummary:
        if asset_id not in rows:
            rows[asset_id] = AssetSummary(asset_id=asset_id)
        return rows[asset_id]

    for txn in sorted(transactions, key=ledger_order):
        if not touches_base(txn, base_id):
            continue
        if not in_window(txn.occurred_at.date(), date_from, date_to):
            continue
        for item in txn.items:
            if asset_ids is not None and item.asset_id not in asset_ids:
                continue
            summary = row(item.asset_id)
            if isinstance(txn, Purchase):
                summary.purchases += item.quantity
            elif isinstance(txn, Transfer):
                if txn.to_base_id == base_id:
                    summary.transfers_in += item.quantity
                if txn.from_base_id == base_id:
                    summary.transfers_out += item.quantity
            elif isinstance(txn, Assignment):
                summary.assigned += item.quantity
            elif isinstance(txn, Expenditure):
                summary.expended += item.quantity

    for asset_id, summary in rows.items():
        summary.opening_balance = opening.stock(base_id, asset_id).quantity if opening else 0
        summary.net_movements = summary.purchases + summary.transfers_in - summary.transfers_out
        summary.closing_balance = (
            summary.opening_balance + summary.net_movements - summary.expended
        )

    return [rows[asset_id] for asset_id in sorted(rows)]


def drawn_from(draw: LedgerTransaction) -> int:
    """Base whose stock ``draw`` consumes."""
    return draw.from_base_id if isinstance(draw, Transfer) else draw.base_id


def require_stock(transactions: list[LedgerTransaction], draw: LedgerTransaction) -> None:
    """
    Raise InsufficientStockError unless ``draw`` can be taken on its business date.

    Availability is checked against the replay up to the draw's own date,
    then every later day is replayed with the draw included so a backdated
    draw cannot push an existing later movement below zero.
    """
    base_id = drawn_from(draw)
    quantities = draw.quantities()
    as_of = draw.occurred_at.date()

    InventoryLedger.replay(transactions, until=as_of).require_available(
        base_id, quantities, as_of=as_of
    )
    require_non_negative(
        [*transactions, draw],
        pairs={(base_id, asset_id) for asset_id in quantities},
    )


def require_non_negative(
    transactions: list[LedgerTransaction],
    pairs: set[tuple[int, int]] | None = None,
) -> None:
    """Raise if available stock ends any business day below zero."""
    ledger = InventoryLedger()
    ordered = sorted(transactions, key=ledger_order)
    for day, group in groupby(ordered, key=lambda txn: txn.occurred_at.date()):
        for txn in group:
            ledger.apply(txn)
        for stock in ledger.all_stocks():
            if pairs is not None and (stock.base_id, stock.asset_id) not in pairs:
                continue
            if stock.available < 0:
                raise InsufficientStockError(
                    base_id=stock.base_id,
                    asset_id=stock.asset_id,
                    requested=stock.assigned + stock.transferred_out + stock.expended,
                    available=stock.purchased + stock.transferred_in,
                    as_of=day,
                )
