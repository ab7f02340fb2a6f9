"""
Movement log compiler.

Projects the four transaction kinds into one time-ordered list of
movement entries and answers filtered, sorted, paginated queries over it.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from armory.core.entities.movement import ActionType, MovementLogEntry
from armory.core.entities.transaction import (
    Assignment,
    Expenditure,
    LedgerTransaction,
    LineItem,
    Purchase,
    Transfer,
)
from armory.core.exceptions import InvalidDateRangeError, ValidationError
from armory.core.services.inventory_ledger import in_window, ledger_order

SORT_KEYS = {
    "date": lambda entry: entry.date,
    "actionType": lambda entry: entry.action_type.value,
    "performedBy": lambda entry: entry.performed_by.lower(),
    "quantity": lambda entry: entry.total_quantity,
}


@dataclass
class MovementFilter:
    """Conjunctive predicates over movement entries. ``None`` matches all."""

    asset_id: int | None = None
    base_id: int | None = None
    date_from: date | None = None
    date_to: date | None = None
    action_type: ActionType | None = None
    performed_by: str | None = None
    search: str | None = None

    def __post_init__(self) -> None:
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise InvalidDateRangeError(self.date_from, self.date_to)


@dataclass
class MovementPage:
    """One page of compiled movement entries."""

    logs: list[MovementLogEntry]
    page: int
    limit: int
    total: int
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        self.total_pages = math.ceil(self.total / self.limit) if self.total else 0


class MovementLogCompiler:
    """Builds and queries the unified movement log."""

    def __init__(self, asset_names: dict[int, str] | None = None):
        """
        Args:
            asset_names: Asset id to name, used by free-text search
        """
        self._asset_names = asset_names or {}

    @staticmethod
    def to_entry(txn: LedgerTransaction) -> MovementLogEntry:
        """Project one transaction into a movement entry."""
        items = [LineItem(asset_id=item.asset_id, quantity=item.quantity) for item in txn.items]
        common = {
            "source_id": txn.id,
            "date": txn.occurred_at,
            "action_type": txn.kind,
            "items": items,
            "remarks": txn.remarks,
        }
        if isinstance(txn, Purchase):
            return MovementLogEntry(
                base_id=txn.base_id,
                performed_by=txn.created_by,
                reference=txn.invoice_number,
                **common,
            )
        if isinstance(txn, Transfer):
            return MovementLogEntry(
                base_id=txn.from_base_id,
                to_base_id=txn.to_base_id,
                performed_by=txn.created_by,
                reference=txn.invoice_number,
                **common,
            )
        if isinstance(txn, Assignment):
            return MovementLogEntry(
                base_id=txn.base_id,
                performed_by=txn.created_by,
                reference=txn.assigned_to,
                **common,
            )
        if isinstance(txn, Expenditure):
            return MovementLogEntry(
                base_id=txn.base_id,
                performed_by=txn.expended_by,
                reference=f"assignment:{txn.assignment_id}" if txn.assignment_id else None,
                **common,
            )
        raise TypeError(f"Unknown transaction type: {type(txn).__name__}")

    def compile(self, transactions: Iterable[LedgerTransaction]) -> list[MovementLogEntry]:
        """All entries in creation order (oldest first)."""
        return [self.to_entry(txn) for txn in sorted(transactions, key=ledger_order)]

    def matches(self, entry: MovementLogEntry, criteria: MovementFilter) -> bool:
        if criteria.action_type is not None and entry.action_type != criteria.action_type:
            return False
        if criteria.base_id is not None and not entry.touches_base(criteria.base_id):
            return False
        if criteria.asset_id is not None and all(
            item.asset_id != criteria.asset_id for item in entry.items
        ):
            return False
        if not in_window(entry.date.date(), criteria.date_from, criteria.date_to):
            return False
        if criteria.performed_by and entry.performed_by.lower() != criteria.performed_by.lower():
            return False
        if criteria.search:
            return criteria.search.lower() in self._haystack(entry)
        return True

    def _haystack(self, entry: MovementLogEntry) -> str:
        parts = [entry.performed_by, entry.remarks or "", entry.reference or ""]
        parts.extend(self._asset_names.get(item.asset_id, "") for item in entry.items)
        return " ".join(parts).lower()

    def query(
        self,
        transactions: Iterable[LedgerTransaction],
        criteria: MovementFilter | None = None,
        sort_by: str = "date",
        descending: bool = True,
        page: int = 1,
        limit: int = 10,
    ) -> MovementPage:
        """
        Filter, sort and paginate the movement log.

        Sorting is stable, so entries with equal keys keep creation order.
        """
        if sort_by not in SORT_KEYS:
            raise ValidationError("sortBy", f"unsupported sort key: {sort_by}", sort_by)
        if page < 1:
            raise ValidationError("page", "page must be at least 1", page)
        if limit < 1:
            raise ValidationError("limit", "limit must be at least 1", limit)

        criteria = criteria or MovementFilter()
        entries = [entry for entry in self.compile(transactions) if self.matches(entry, criteria)]
        entries = sorted(entries, key=SORT_KEYS[sort_by], reverse=descending)

        start = (page - 1) * limit
        return MovementPage(
            logs=entries[start : start + limit],
            page=page,
            limit=limit,
            total=len(entries),
        )
