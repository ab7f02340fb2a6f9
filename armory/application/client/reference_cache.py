"""
Asset and base lists shared by the client screens.

One cache object is created per session and handed to whoever needs it.
"""

import asyncio

from armory.application.client.feed import LoadState
from armory.application.dto.requests import AssetRequest, BaseRequest
from armory.application.dto.responses import AssetResponse, BaseResponse
from armory.config import get_logger
from armory.core.exceptions import ClientError
from armory.infrastructure.http import ArmoryApiClient

logger = get_logger(__name__)


class ReferenceDataCache:
    """
    Owned copy of the asset and base lists.

    ``refresh()`` fetches both lists concurrently and replaces them
    wholesale. A list that fails to load becomes empty. Every write made
    through the cache ends with a refresh.
    """

    def __init__(self, api: ArmoryApiClient):
        self._api = api
        self.assets: list[AssetResponse] = []
        self.bases: list[BaseResponse] = []
        self.state = LoadState.IDLE
        self.errors: list[ClientError] = []

    async def refresh(self) -> None:
        self.state = LoadState.LOADING
        assets, bases = await asyncio.gather(
            self._api.list_assets(),
            self._api.list_bases(),
            return_exceptions=True,
        )

        errors = []
        for name, result in (("assets", assets), ("bases", bases)):
            if isinstance(result, ClientError):
                logger.warning("reference_list_unavailable", list=name, error=result.message)
                errors.append(result)
            elif isinstance(result, BaseException):
                raise result

        self.assets = [] if isinstance(assets, ClientError) else assets
        self.bases = [] if isinstance(bases, ClientError) else bases
        self.errors = errors

        if errors:
            self.state = LoadState.ERROR
        elif not self.assets and not self.bases:
            self.state = LoadState.EMPTY
        else:
            self.state = LoadState.READY

        logger.debug("reference_data_refreshed", assets=len(self.assets), bases=len(self.bases))

    # Lookups

    def asset(self, asset_id: int) -> AssetResponse | None:
        return next((a for a in self.assets if a.id == asset_id), None)

    def base(self, base_id: int) -> BaseResponse | None:
        return next((b for b in self.bases if b.id == base_id), None)

    def asset_name(self, asset_id: int) -> str:
        asset = self.asset(asset_id)
        return asset.name if asset else f"Asset #{asset_id}"

    def base_name(self, base_id: int) -> str:
        base = self.base(base_id)
        return base.name if base else f"Base #{base_id}"

    # Writes

    async def create_asset(self, request: AssetRequest) -> AssetResponse:
        asset = await self._api.create_asset(request)
        await self.refresh()
        return asset

    async def update_asset(self, asset_id: int, request: AssetRequest) -> AssetResponse:
        asset = await self._api.update_asset(asset_id, request)
        await self.refresh()
        return asset

    async def delete_asset(self, asset_id: int) -> None:
        await self._api.delete_asset(asset_id)
        await self.refresh()

    async def create_base(self, request: BaseRequest) -> BaseResponse:
        base = await self._api.create_base(request)
        await self.refresh()
        return base

    async def update_base(self, base_id: int, request: BaseRequest) -> BaseResponse:
        base = await self._api.update_base(base_id, request)
        await self.refresh()
        return base

    async def delete_base(self, base_id: int) -> None:
        await self._api.delete_base(base_id)
        await self.refresh()
