"""Tests for ArmoryApiClient against a mocked transport."""

import json

import httpx
import pytest

from armory.application.client.feed import LiveFeed, LoadState
from armory.application.dto.requests import ExpendItemRequest, MarkExpendedRequest
from armory.core.entities import Actor, Role
from armory.core.exceptions import (
    ApiRejectedError,
    MalformedResponseError,
    TransportFailureError,
)
from armory.core.services.query_builder import FilterState
from armory.infrastructure.http import ArmoryApiClient, error_message


def _client(handler, actor=None) -> ArmoryApiClient:
    return ArmoryApiClient(
        base_url="http://ledger.test",
        actor=actor,
        transport=httpx.MockTransport(handler),
    )


class TestErrorMessage:
    def test_error_key_wins(self):
        response = httpx.Response(400, json={"error": "Bad base", "message": "ignored"})
        assert error_message(response) == "Bad base"

    def test_message_key(self):
        response = httpx.Response(409, json={"message": "Assignment 3 is already expended"})
        assert error_message(response) == "Assignment 3 is already expended"

    def test_plain_text_body(self):
        assert error_message(httpx.Response(502, text="Bad gateway")) == "Bad gateway"

    def test_empty_body_uses_reason(self):
        assert error_message(httpx.Response(503)) == "Service Unavailable"


class TestArmoryApiClient:
    @pytest.mark.asyncio
    async def test_actor_headers_sent(self, temp_settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json={"status": "ok", "version": "1.0.0", "database": True})

        actor = Actor(name="cmdr", role=Role.BASE_COMMANDER, base_id=1)
        async with _client(handler, actor) as api:
            health = await api.health()

        assert health.status == "ok"
        assert seen["x-user-name"] == "cmdr"
        assert seen["x-user-role"] == "base_commander"
        assert seen["x-user-base"] == "1"

    @pytest.mark.asyncio
    async def test_filter_state_becomes_canonical_query(self, temp_settings):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.query.decode())
            return httpx.Response(200, json={"stocks": []})

        state = FilterState(search="rifle", category="All categories", show_low_stock=True)
        async with _client(handler) as api:
            await api.get_my_stock(state)
            await api.get_my_stock(state)

        assert seen[0] == seen[1] == "search=rifle&showLowStock=true"

    @pytest.mark.asyncio
    async def test_body_uses_wire_names(self, temp_settings):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(
                201,
                json={
                    "id": 9,
                    "base": 1,
                    "expendedBy": "Pvt. Das",
                    "expendDate": "2025-01-05T09:00:00",
                    "items": [{"asset": 1, "quantity": 10}],
                    "assignment": 3,
                    "assignmentStatus": "Expended",
                    "createdBy": "cmdr",
                    "createdAt": "2025-01-05T09:00:00",
                },
            )

        request = MarkExpendedRequest(expended_by="Pvt. Das", items=[ExpendItemRequest(item_id=1)])
        async with _client(handler) as api:
            expenditure = await api.mark_assigned_as_expended(3, request)

        assert bodies == [{"expendedBy": "Pvt. Das", "items": [{"itemId": 1}]}]
        assert expenditure.assignment_id == 3

    @pytest.mark.asyncio
    async def test_rejection_carries_server_message(self, temp_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"error": "Access denied for this base"})

        async with _client(handler) as api:
            with pytest.raises(ApiRejectedError) as exc_info:
                await api.get_summary()

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Access denied for this base"
        assert not exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_transport_failure(self, temp_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as api:
            with pytest.raises(TransportFailureError) as exc_info:
                await api.list_assets()

        assert exc_info.value.retryable
        assert exc_info.value.details["path"] == "/api/settings/assets/get"

    @pytest.mark.asyncio
    async def test_non_json_success_body(self, temp_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway login</html>")

        async with _client(handler) as api:
            with pytest.raises(MalformedResponseError) as exc_info:
                await api.get_my_stock()

        assert exc_info.value.code == "MALFORMED_RESPONSE"
        assert exc_info.value.details["path"] == "/api/stocks/my"

    @pytest.mark.asyncio
    async def test_wrong_shape_feeds_error_state(self, temp_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"stocks": "none"})

        async with _client(handler) as api:
            feed = LiveFeed("stock", api.get_my_stock)
            await feed.load()

        assert feed.state is LoadState.ERROR
        assert isinstance(feed.error, MalformedResponseError)
        assert feed.message.startswith("Unreadable response from the ledger service")

    @pytest.mark.asyncio
    async def test_mapping_query_sorted(self, temp_settings):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(dict(request.url.params))
            return httpx.Response(200, json={"logs": [], "page": 1, "limit": 10, "total": 0})

        async with _client(handler) as api:
            page = await api.get_movements({"page": 2, "baseId": None, "actionType": "transfer"})

        assert seen == [{"actionType": "transfer", "page": "2"}]
        assert page.logs == []
