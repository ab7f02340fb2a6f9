"""Tests for LiveFeed last-write-wins loading."""

import asyncio
from types import SimpleNamespace

import pytest

from armory.application.client.feed import LiveFeed, LoadState, user_message
from armory.core.exceptions import ApiRejectedError, TransportFailureError


class GatedFetch:
    """Fetch whose responses are released by the test, in any order."""

    def __init__(self):
        self.gates: dict[str, asyncio.Event] = {}
        self.results: dict[str, object] = {}

    async def __call__(self, query):
        gate = self.gates.setdefault(query, asyncio.Event())
        await gate.wait()
        result = self.results[query]
        if isinstance(result, Exception):
            raise result
        return result

    def release(self, query, result):
        self.results[query] = result
        self.gates.setdefault(query, asyncio.Event()).set()


def _stocks(*names):
    return SimpleNamespace(stocks=list(names))


class TestLiveFeed:
    @pytest.mark.asyncio
    async def test_newest_query_wins_when_older_returns_last(self):
        fetch = GatedFetch()
        feed = LiveFeed("stock", fetch)

        weapon = asyncio.create_task(feed.load("weapon"))
        vehicle = asyncio.create_task(feed.load("vehicle"))
        await asyncio.sleep(0)

        fetch.release("vehicle", _stocks("Jeep"))
        assert await vehicle is True
        fetch.release("weapon", _stocks("Rifle"))
        assert await weapon is False

        assert feed.data.stocks == ["Jeep"]
        assert feed.state is LoadState.READY

    @pytest.mark.asyncio
    async def test_stale_failure_does_not_surface(self):
        fetch = GatedFetch()
        feed = LiveFeed("stock", fetch)

        old = asyncio.create_task(feed.load("weapon"))
        new = asyncio.create_task(feed.load("vehicle"))
        await asyncio.sleep(0)

        fetch.release("vehicle", _stocks("Jeep"))
        await new
        fetch.release("weapon", TransportFailureError("GET", "/api/stocks/my", "timeout"))
        assert await old is False

        assert feed.error is None
        assert feed.state is LoadState.READY

    @pytest.mark.asyncio
    async def test_error_state_carries_server_message(self):
        async def fetch(query):
            raise ApiRejectedError(403, "Access denied for this base", "/api/summary")

        feed = LiveFeed("summary", fetch)
        await feed.load()

        assert feed.state is LoadState.ERROR
        assert feed.message == "Access denied for this base"

    @pytest.mark.asyncio
    async def test_unexpected_exception_ends_in_error(self):
        async def fetch(query):
            raise ValueError("Expecting value: line 1 column 1 (char 0)")

        feed = LiveFeed("stock", fetch)
        assert await feed.load() is True

        assert feed.state is LoadState.ERROR
        assert isinstance(feed.error, ValueError)
        assert feed.message == "Unexpected error"

    @pytest.mark.asyncio
    async def test_recovers_after_unexpected_exception(self):
        results = [RuntimeError("decoder blew up"), _stocks("Rifle")]

        async def fetch(query):
            result = results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        feed = LiveFeed("stock", fetch)
        await feed.load()
        await feed.refetch()

        assert feed.state is LoadState.READY
        assert feed.error is None

    @pytest.mark.asyncio
    async def test_empty_collection(self):
        async def fetch(query):
            return SimpleNamespace(logs=[])

        feed = LiveFeed("movement", fetch)
        await feed.load()
        assert feed.state is LoadState.EMPTY

    @pytest.mark.asyncio
    async def test_refetch_reuses_last_query(self):
        seen = []

        async def fetch(query):
            seen.append(query)
            return _stocks("Rifle")

        feed = LiveFeed("stock", fetch)
        await feed.load({"category": "weapon"})
        await feed.refetch()

        assert seen == [{"category": "weapon"}, {"category": "weapon"}]
        assert feed.generation == 2

    def test_starts_idle(self):
        assert LiveFeed("stock", None).state is LoadState.IDLE

    def test_user_message_for_unexpected_errors(self):
        assert user_message(RuntimeError("boom")) == "Unexpected error"
