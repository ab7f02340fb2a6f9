"""
Last-write-wins data feeds.

A feed owns one remote query and its latest result. Every load is tagged
with a generation number; when a response (or failure) arrives for a
generation that is no longer the newest, it is dropped.
"""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Generic, TypeVar

from armory.config import get_logger
from armory.core.exceptions import ArmoryError

logger = get_logger(__name__)

T = TypeVar("T")


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


def user_message(error: Exception) -> str:
    """Text to show for a failed request."""
    if isinstance(error, ArmoryError):
        return error.message
    return "Unexpected error"


# List field on each response model
_COLLECTIONS = (
    "stocks",
    "logs",
    "summaries",
    "purchases",
    "transfers",
    "assignments",
    "expenditures",
)


def _is_empty(result: Any) -> bool:
    for field in _COLLECTIONS:
        if hasattr(result, field):
            return not getattr(result, field)
    return result is None


class LiveFeed(Generic[T]):
    """
    One screen's view of a remote query.

    Usage:
        feed = LiveFeed("stock", api.get_my_stock)
        await feed.load(state)
        if feed.state is LoadState.READY:
            render(feed.data)
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[Any], Awaitable[T]],
        is_empty: Callable[[T], bool] = _is_empty,
    ):
        self.name = name
        self._fetch = fetch
        self._is_empty = is_empty

        self.state = LoadState.IDLE
        self.data: T | None = None
        self.error: Exception | None = None
        self._generation = 0
        self._last_query: Any = None

    @property
    def generation(self) -> int:
        return self._generation

    async def load(self, query: Any = None) -> bool:
        """
        Run the query and keep its result if it is still the newest.

        Returns:
            True if this call's result was applied
        """
        self._generation += 1
        generation = self._generation
        self._last_query = query
        self.state = LoadState.LOADING

        try:
            result = await self._fetch(query)
        except Exception as e:
            if generation != self._generation:
                self._discard(generation, failed=True)
                return False
            self.error = e
            self.state = LoadState.ERROR
            if isinstance(e, ArmoryError):
                logger.info("feed_failed", feed=self.name, generation=generation, error=e.message)
            else:
                logger.exception("feed_crashed", feed=self.name, generation=generation)
            return True

        if generation != self._generation:
            self._discard(generation, failed=False)
            return False

        self.data = result
        self.error = None
        self.state = LoadState.EMPTY if self._is_empty(result) else LoadState.READY
        return True

    async def refetch(self) -> bool:
        """Reload with the last query."""
        return await self.load(self._last_query)

    @property
    def message(self) -> str | None:
        return user_message(self.error) if self.error else None

    def _discard(self, generation: int, failed: bool) -> None:
        logger.debug(
            "feed_response_discarded",
            feed=self.name,
            generation=generation,
            latest=self._generation,
            failed=failed,
        )
