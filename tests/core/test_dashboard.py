"""Tests for dashboard aggregation."""

from datetime import date, datetime

import pytest

from armory.core.entities import AssetSummary
from armory.core.exceptions import InvalidDateRangeError
from armory.core.services.dashboard import DashboardAggregator, resolve_window


@pytest.fixture
def aggregator() -> DashboardAggregator:
    return DashboardAggregator()


@pytest.fixture
def ledger(make_purchase, make_transfer, make_expenditure):
    return [
        make_purchase(items={1: 100, 2: 20}, day=datetime(2025, 1, 1)),
        make_purchase(base_id=2, items={1: 30}, day=datetime(2025, 1, 1)),
        make_transfer(items={1: 10}, day=datetime(2025, 1, 2)),
        make_expenditure(items={2: 4}, day=datetime(2025, 1, 3)),
    ]


class TestResolveWindow:
    def test_lone_as_of_is_one_day(self):
        assert resolve_window(date(2025, 1, 5)) == (date(2025, 1, 5), date(2025, 1, 5))

    def test_explicit_bounds_win(self):
        assert resolve_window(date(2025, 1, 5), date(2025, 1, 1), None) == (date(2025, 1, 1), None)

    def test_open_window(self):
        assert resolve_window() == (None, None)

    def test_inverted(self):
        with pytest.raises(InvalidDateRangeError):
            resolve_window(None, date(2025, 2, 1), date(2025, 1, 1))


class TestDashboardAggregator:
    def test_totals_equal_sum_of_rows(self, aggregator, ledger):
        summaries, totals = aggregator.summarize(ledger, 1)
        assert totals.total_net_movements == sum(s.net_movements for s in summaries)
        assert totals.total_closing_balance == sum(s.closing_balance for s in summaries)
        assert totals.total_expended == 4

    def test_fold_of_nothing_is_zero(self, aggregator):
        assert aggregator.fold([]).total_net_movements == 0

    def test_internal_transfers_cancel_across_fleet(self, aggregator, ledger):
        totals = aggregator.fold_fleet(ledger, [1, 2])
        assert totals.total_transfers_in == totals.total_transfers_out == 10
        assert totals.total_net_movements == 150

    def test_fleet_rows_merged_per_asset(self, aggregator, ledger):
        summaries, totals = aggregator.summarize_fleet(ledger, [1, 2])
        rifle = next(s for s in summaries if s.asset_id == 1)
        assert rifle.purchases == 130
        assert rifle.closing_balance == 130
        assert totals.total_net_movements == sum(s.net_movements for s in summaries)

    def test_merge_does_not_mutate_inputs(self):
        row = AssetSummary(asset_id=1, purchases=5)
        merged = DashboardAggregator.merge([row, AssetSummary(asset_id=1, purchases=3)])
        assert merged[0].purchases == 8
        assert row.purchases == 5
