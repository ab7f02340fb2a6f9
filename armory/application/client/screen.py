"""
Screen controllers: filter state wired to a live feed.

Every filter change rebuilds the query from the current state and loads
the feed. Only the newest response is kept, so quick successive changes
settle on the last one.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from armory.application.client.debounce import SearchDebouncer
from armory.application.client.feed import LiveFeed, LoadState
from armory.application.dto.requests import ExpendItemRequest, MarkExpendedRequest
from armory.application.dto.responses import AssignmentResponse, ExpenditureResponse
from armory.config import get_logger
from armory.core.entities.access import Actor, Operation
from armory.core.exceptions import PermissionDeniedError, ValidationError
from armory.core.services.query_builder import FilterState, build_query
from armory.infrastructure.http import ArmoryApiClient

logger = get_logger(__name__)


class FilteredScreen:
    """
    A list screen: one ``FilterState``, one feed, one search box.

    Usage:
        screen = FilteredScreen("stock", api.get_my_stock)
        await screen.apply(category="weapon")
        screen.type_search("rif")     # fires after the debounce delay
    """

    def __init__(
        self,
        screen: str,
        fetch: Callable[[FilterState], Awaitable[Any]],
        state: FilterState | None = None,
        debounce_seconds: float | None = None,
    ):
        self.screen = screen
        self.filters = state or FilterState()
        self.feed = LiveFeed(screen, fetch)
        self.search = SearchDebouncer(self._search_fired, debounce_seconds)

    @property
    def state(self) -> LoadState:
        return self.feed.state

    @property
    def query(self) -> dict[str, str]:
        return build_query(self.filters, self.screen)

    async def apply(self, **changes: Any) -> bool:
        """Change predicates (page resets to 1) and reload."""
        self.filters = self.filters.update(**changes)
        return await self.reload()

    async def set_date_from(self, value) -> bool:
        self.filters = self.filters.set_date_from(value)
        return await self.reload()

    async def set_date_to(self, value) -> bool:
        self.filters = self.filters.set_date_to(value)
        return await self.reload()

    async def go_to_page(self, page: int) -> bool:
        self.filters = self.filters.set_page(page)
        return await self.reload()

    async def sort(self, field: str) -> bool:
        self.filters = self.filters.sort(field)
        return await self.reload()

    async def clear(self) -> bool:
        self.search.cancel()
        self.filters = self.filters.clear()
        return await self.reload()

    def type_search(self, text: str) -> None:
        self.search.set(text)

    async def reload(self) -> bool:
        return await self.feed.load(self.filters)

    async def _search_fired(self, text: str) -> None:
        await self.apply(search=text)


class FulfillmentDesk:
    """
    Submit assignment expenditures.

    Nothing is changed locally before the service answers. On success
    the dependent feeds are refetched; on rejection the error propagates
    with the service's message and no local state needs undoing.
    """

    def __init__(
        self,
        api: ArmoryApiClient,
        actor: Actor,
        refresh: list[LiveFeed] | None = None,
    ):
        self._api = api
        self._actor = actor
        self._refresh = refresh or []

    def can_expend(self, assignment: AssignmentResponse) -> bool:
        return self._actor.can(Operation.EXPEND_ASSIGNMENT) and not assignment.is_expended

    async def submit(
        self,
        assignment: AssignmentResponse,
        item_ids: list[int],
        expended_by: str,
        remarks: str | None = None,
    ) -> ExpenditureResponse:
        if not self._actor.can(Operation.EXPEND_ASSIGNMENT):
            raise PermissionDeniedError(self._actor.role.value, Operation.EXPEND_ASSIGNMENT.value)
        if not item_ids:
            raise ValidationError("items", "select at least one item")

        request = MarkExpendedRequest(
            expended_by=expended_by,
            items=[ExpendItemRequest(item_id=item_id) for item_id in item_ids],
            remarks=remarks,
            base_id=assignment.base_id,
        )
        expenditure = await self._api.mark_assigned_as_expended(assignment.id, request)

        logger.info(
            "assignment_expenditure_submitted",
            assignment_id=assignment.id,
            expenditure_id=expenditure.id,
            items=len(item_ids),
        )
        await asyncio.gather(*(feed.refetch() for feed in self._refresh))
        return expenditure
