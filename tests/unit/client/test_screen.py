"""Tests for FilteredScreen and FulfillmentDesk."""

from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from armory.application.client import FilteredScreen, FulfillmentDesk, LiveFeed
from armory.application.client.feed import LoadState
from armory.application.dto.responses import AssignmentResponse, ExpenditureResponse
from armory.core.entities import Actor, AssignmentItem, Role
from armory.core.exceptions import ApiRejectedError, PermissionDeniedError, ValidationError


@pytest.fixture
def fetch():
    return AsyncMock(return_value=SimpleNamespace(stocks=["row"]))


@pytest.fixture
def screen(fetch):
    return FilteredScreen("stock", fetch, debounce_seconds=0.01)


class TestFilteredScreen:
    @pytest.mark.asyncio
    async def test_apply_loads_with_new_state(self, screen, fetch):
        await screen.go_to_page(3)
        await screen.apply(category="weapon")

        state = fetch.await_args.args[0]
        assert state.category == "weapon"
        assert state.page == 1
        assert screen.state is LoadState.READY

    @pytest.mark.asyncio
    async def test_query_uses_screen_preset(self, screen):
        await screen.apply(category="weapon", action_type="purchase")
        assert screen.query == {"category": "weapon"}

    @pytest.mark.asyncio
    async def test_inverted_dates_clear_other_bound(self, screen):
        await screen.set_date_to(date(2025, 1, 10))
        await screen.set_date_from(date(2025, 1, 20))
        assert screen.filters.date_to is None

    @pytest.mark.asyncio
    async def test_typed_search_is_debounced(self, screen, fetch):
        screen.type_search("ri")
        screen.type_search("rifle")
        await screen.search.wait()

        assert fetch.await_count == 1
        assert fetch.await_args.args[0].search == "rifle"

    @pytest.mark.asyncio
    async def test_sort_and_clear(self, screen):
        await screen.apply(search="rifle")
        await screen.sort("quantity")
        await screen.clear()

        assert screen.filters.search is None
        assert screen.filters.sort_field == "quantity"


@pytest.fixture
def assignment(make_assignment):
    return AssignmentResponse.from_entity(
        make_assignment(
            id=3,
            items=[
                AssignmentItem(id=1, asset_id=1, quantity=10),
                AssignmentItem(id=2, asset_id=2, quantity=4),
            ],
        )
    )


@pytest.fixture
def feeds():
    return [
        LiveFeed("assignments", AsyncMock(return_value=SimpleNamespace(assignments=[1]))),
        LiveFeed("stock", AsyncMock(return_value=SimpleNamespace(stocks=[1]))),
    ]


class TestFulfillmentDesk:
    @pytest.mark.asyncio
    async def test_submit_sends_item_ids_and_refetches(
        self, commander, assignment, feeds, make_expenditure
    ):
        api = AsyncMock()
        api.mark_assigned_as_expended.return_value = ExpenditureResponse.from_entity(
            make_expenditure(id=9, assignment_id=3)
        )
        desk = FulfillmentDesk(api, commander, refresh=feeds)

        expenditure = await desk.submit(assignment, [1], "Pvt. Das")

        assert expenditure.id == 9
        assignment_id, request = api.mark_assigned_as_expended.await_args.args
        assert assignment_id == 3
        assert request.model_dump(by_alias=True, exclude_none=True)["items"] == [{"itemId": 1}]
        assert request.base_id == 1
        for feed in feeds:
            assert feed.state is LoadState.READY

    @pytest.mark.asyncio
    async def test_rejection_leaves_everything_untouched(self, commander, assignment, feeds):
        api = AsyncMock()
        api.mark_assigned_as_expended.side_effect = ApiRejectedError(
            409, "Assignment 3 is already expended", "/api/expend/markAssignedAsExpended/3"
        )
        desk = FulfillmentDesk(api, commander, refresh=feeds)

        with pytest.raises(ApiRejectedError) as exc_info:
            await desk.submit(assignment, [1], "Pvt. Das")

        assert exc_info.value.message == "Assignment 3 is already expended"
        assert not assignment.items[0].is_expended
        assert all(feed.state is LoadState.IDLE for feed in feeds)

    @pytest.mark.asyncio
    async def test_logistics_officer_cannot_submit(self, logistics, assignment):
        api = AsyncMock()
        desk = FulfillmentDesk(api, logistics)

        assert not desk.can_expend(assignment)
        with pytest.raises(PermissionDeniedError):
            await desk.submit(assignment, [1], "Pvt. Das")
        api.mark_assigned_as_expended.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_selection(self, commander, assignment):
        with pytest.raises(ValidationError):
            await FulfillmentDesk(AsyncMock(), commander).submit(assignment, [], "Pvt. Das")

    def test_can_expend(self, assignment):
        assert FulfillmentDesk(AsyncMock(), Actor(role=Role.ADMIN)).can_expend(assignment)
