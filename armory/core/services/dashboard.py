"""
Dashboard aggregation.

Totals are a plain fold over per-asset summaries, so per-asset rows and
dashboard totals can never disagree.
"""

from collections.abc import Iterable, Sequence
from datetime import date

from armory.core.entities.inventory import AssetSummary, DashboardTotals
from armory.core.entities.transaction import LedgerTransaction
from armory.core.exceptions import InvalidDateRangeError
from armory.core.services.inventory_ledger import reconcile_window

_FIELDS = (
    ("opening_balance", "total_opening_balance"),
    ("closing_balance", "total_closing_balance"),
    ("net_movements", "total_net_movements"),
    ("purchases", "total_purchases"),
    ("transfers_in", "total_transfers_in"),
    ("transfers_out", "total_transfers_out"),
    ("assigned", "total_assigned"),
    ("expended", "total_expended"),
)


def resolve_window(
    as_of: date | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> tuple[date | None, date | None]:
    """
    Turn dashboard parameters into an inclusive window.

    A lone ``as_of`` date selects that single day. Explicit bounds win.
    """
    if date_from is None and date_to is None and as_of is not None:
        return as_of, as_of
    if date_from is not None and date_to is not None and date_from > date_to:
        raise InvalidDateRangeError(date_from, date_to)
    return date_from, date_to


class DashboardAggregator:
    """Folds asset summaries into dashboard totals."""

    @staticmethod
    def fold(summaries: Iterable[AssetSummary]) -> DashboardTotals:
        totals = DashboardTotals()
        for summary in summaries:
            for source, target in _FIELDS:
                setattr(totals, target, getattr(totals, target) + getattr(summary, source))
        return totals

    def summarize(
        self,
        transactions: Sequence[LedgerTransaction],
        base_id: int,
        date_from: date | None = None,
        date_to: date | None = None,
        asset_ids: set[int] | None = None,
    ) -> tuple[list[AssetSummary], DashboardTotals]:
        """Per-asset summaries for one base plus their totals."""
        summaries = reconcile_window(transactions, base_id, date_from, date_to, asset_ids)
        return summaries, self.fold(summaries)

    def fold_fleet(
        self,
        transactions: Sequence[LedgerTransaction],
        base_ids: Iterable[int],
        date_from: date | None = None,
        date_to: date | None = None,
        asset_ids: set[int] | None = None,
    ) -> DashboardTotals:
        """Totals across several bases.

        Transfers between two of the listed bases count once as out and once
        as in, so they cancel in ``total_net_movements``.
        """
        summaries: list[AssetSummary] = []
        for base_id in base_ids:
            summaries.extend(
                reconcile_window(transactions, base_id, date_from, date_to, asset_ids)
            )
        return self.fold(summaries)

    @staticmethod
    def merge(summaries: Iterable[AssetSummary]) -> list[AssetSummary]:
        """Combine rows for the same asset (e.g. from several bases)."""
        merged: dict[int, AssetSummary] = {}
        for summary in summaries:
            if summary.asset_id not in merged:
                merged[summary.asset_id] = summary.model_copy()
                continue
            row = merged[summary.asset_id]
            for source, _ in _FIELDS:
                setattr(row, source, getattr(row, source) + getattr(summary, source))
        return [merged[asset_id] for asset_id in sorted(merged)]

    def summarize_fleet(
        self,
        transactions: Sequence[LedgerTransaction],
        base_ids: Iterable[int],
        date_from: date | None = None,
        date_to: date | None = None,
        asset_ids: set[int] | None = None,
    ) -> tuple[list[AssetSummary], DashboardTotals]:
        """Per-asset summaries merged across bases plus their totals."""
        per_base: list[AssetSummary] = []
        for base_id in base_ids:
            per_base.extend(
                reconcile_window(transactions, base_id, date_from, date_to, asset_ids)
            )
        merged = self.merge(per_base)
        return merged, self.fold(merged)
