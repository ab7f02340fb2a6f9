"""Tests for ReferenceDataCache."""

from unittest.mock import AsyncMock

import pytest

from armory.application.client import ReferenceDataCache
from armory.application.client.feed import LoadState
from armory.application.dto.requests import AssetRequest
from armory.application.dto.responses import AssetResponse, BaseResponse
from armory.core.entities import AssetCategory
from armory.core.exceptions import ApiRejectedError, TransportFailureError

RIFLE = AssetResponse(id=1, name="Rifle", category=AssetCategory.WEAPON)
ALPHA = BaseResponse(id=1, name="Alpha", district="Pune", state="MH")


@pytest.fixture
def api():
    api = AsyncMock()
    api.list_assets.return_value = [RIFLE]
    api.list_bases.return_value = [ALPHA]
    return api


class TestReferenceDataCache:
    @pytest.mark.asyncio
    async def test_refresh_loads_both_lists(self, api):
        cache = ReferenceDataCache(api)
        await cache.refresh()

        assert cache.state is LoadState.READY
        assert cache.asset_name(1) == "Rifle"
        assert cache.base(1).district == "Pune"
        api.list_assets.assert_awaited_once()
        api.list_bases.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_list_degrades_to_empty(self, api):
        api.list_bases.side_effect = TransportFailureError("GET", "/api/settings/bases/get", "down")
        cache = ReferenceDataCache(api)
        await cache.refresh()

        assert cache.assets == [RIFLE]
        assert cache.bases == []
        assert cache.state is LoadState.ERROR
        assert len(cache.errors) == 1

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, api):
        api.list_assets.side_effect = RuntimeError("bug")
        with pytest.raises(RuntimeError):
            await ReferenceDataCache(api).refresh()

    @pytest.mark.asyncio
    async def test_nothing_configured_is_empty(self, api):
        api.list_assets.return_value = []
        api.list_bases.return_value = []
        cache = ReferenceDataCache(api)
        await cache.refresh()
        assert cache.state is LoadState.EMPTY

    @pytest.mark.asyncio
    async def test_write_refreshes(self, api):
        jeep = AssetResponse(id=2, name="Jeep", category=AssetCategory.VEHICLE)
        api.create_asset.return_value = jeep
        api.list_assets.return_value = [RIFLE, jeep]

        cache = ReferenceDataCache(api)
        created = await cache.create_asset(AssetRequest(name="Jeep", category="vehicle"))

        assert created.id == 2
        assert cache.asset_name(2) == "Jeep"

    @pytest.mark.asyncio
    async def test_failed_write_keeps_lists(self, api):
        cache = ReferenceDataCache(api)
        await cache.refresh()
        api.delete_asset.side_effect = ApiRejectedError(409, "Asset 1 is in use", "/x")

        with pytest.raises(ApiRejectedError):
            await cache.delete_asset(1)
        assert cache.assets == [RIFLE]
        assert api.list_assets.await_count == 1

    def test_unknown_ids_get_placeholder_names(self, api):
        cache = ReferenceDataCache(api)
        assert cache.asset_name(5) == "Asset #5"
        assert cache.base_name(9) == "Base #9"
