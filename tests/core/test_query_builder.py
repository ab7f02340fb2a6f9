"""Tests for filter state and query serialization."""

from dataclasses import replace
from datetime import date, datetime

import pytest

from armory.core.exceptions import InvalidDateRangeError, ValidationError
from armory.core.services.query_builder import FilterState, build_query, to_query_string


class TestBuildQuery:
    def test_same_state_same_bytes(self):
        state = FilterState(search="rifle", category="weapon", date_from=date(2025, 1, 1))
        assert to_query_string(state) == to_query_string(state)
        assert to_query_string(state) == to_query_string(
            FilterState(date_from=date(2025, 1, 1), category="weapon", search="rifle")
        )

    def test_keys_are_sorted(self):
        query = build_query(FilterState(search="x", base_id=3, action_type="purchase"))
        assert list(query) == sorted(query)

    @pytest.mark.parametrize(
        "sentinel", ["All statuses", "All types", "All categories", "All bases"]
    )
    def test_all_sentinels_omitted(self, sentinel):
        query = build_query(FilterState(status=sentinel, category=sentinel, base_id=sentinel))
        assert "status" not in query and "category" not in query and "baseId" not in query

    def test_empty_values_omitted(self):
        assert build_query(FilterState(search="   ", performed_by="")) == {"page": "1"}

    def test_dates_serialize_as_iso_days(self):
        query = build_query(
            FilterState(date_from=date(2025, 1, 1), date_to=datetime(2025, 1, 31, 18, 30))
        )
        assert query["dateFrom"] == "2025-01-01"
        assert query["dateTo"] == "2025-01-31"

    def test_booleans(self):
        assert build_query(FilterState(show_low_stock=True))["showLowStock"] == "true"
        assert "showLowStock" not in build_query(FilterState(show_low_stock=False))

    def test_as_of_goes_out_as_date(self):
        query = build_query(FilterState(as_of=date(2025, 3, 1)), "summary")
        assert query == {"date": "2025-03-01"}

    def test_screen_preset_restricts_keys(self):
        state = FilterState(search="rifle", action_type="transfer", show_low_stock=True)
        assert "actionType" not in build_query(state, "stock")
        assert "showLowStock" not in build_query(state, "movement")

    def test_unknown_screen(self):
        with pytest.raises(ValidationError):
            build_query(FilterState(), "reports")

    def test_forced_inverted_range_rejected(self):
        state = replace(FilterState(), date_from=date(2025, 2, 1), date_to=date(2025, 1, 1))
        with pytest.raises(InvalidDateRangeError):
            build_query(state)


class TestFilterState:
    def test_date_from_after_date_to_clears_date_to(self):
        state = FilterState().set_date_to(date(2025, 1, 10)).set_date_from(date(2025, 1, 20))
        assert state.date_from == date(2025, 1, 20)
        assert state.date_to is None

    def test_date_to_before_date_from_clears_date_from(self):
        state = FilterState().set_date_from(date(2025, 1, 20)).set_date_to(date(2025, 1, 10))
        assert state.date_from is None
        assert state.date_to == date(2025, 1, 10)

    def test_valid_range_kept(self):
        state = FilterState().set_date_from(date(2025, 1, 1)).set_date_to(date(2025, 1, 31))
        assert (state.date_from, state.date_to) == (date(2025, 1, 1), date(2025, 1, 31))

    def test_predicate_change_resets_page(self):
        state = FilterState().set_page(4).update(category="vehicle")
        assert state.page == 1

    def test_page_change_keeps_predicates(self):
        state = FilterState(category="vehicle").update(page=3)
        assert state.page == 3 and state.category == "vehicle"

    def test_update_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            FilterState().update(colour="green")

    def test_update_rejects_date_bounds(self):
        with pytest.raises(ValidationError):
            FilterState().update(date_from=date(2025, 1, 1))

    def test_sort_toggles(self):
        state = FilterState().sort("quantity")
        assert (state.sort_field, state.sort_direction) == ("quantity", "asc")
        assert state.sort("quantity").sort_direction == "desc"
        assert state.sort("quantity").sort("quantity").sort_direction == "asc"

    def test_clear_keeps_paging_and_sort(self):
        state = FilterState(limit=25, search="x", sort_field="date", sort_direction="desc")
        cleared = state.clear()
        assert cleared.search is None
        assert (cleared.limit, cleared.sort_field) == (25, "date")
        assert cleared.active_count() == 0

    def test_active_count(self):
        state = FilterState(search="x", category="All categories", show_low_stock=True)
        assert state.active_count() == 2

    def test_state_is_immutable(self):
        state = FilterState()
        with pytest.raises(AttributeError):
            state.search = "x"  # type: ignore[misc]
