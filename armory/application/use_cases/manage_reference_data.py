"""Manage Reference Data Use Cases: assets and bases."""

from armory.application.dto.requests import AssetRequest, BaseRequest
from armory.application.dto.responses import (
    AssetListResponse,
    AssetResponse,
    BaseListResponse,
    BaseResponse,
)
from armory.application.use_cases.scope import require
from armory.core.entities.access import Actor, Operation
from armory.core.entities.reference import Asset, Base
from armory.core.exceptions import AssetNotFoundError, BaseNotFoundError
from armory.core.interfaces.reference_store import IReferenceStore


class ManageAssetsUseCase:
    """List and edit the asset catalogue. Reads are open to every role."""

    def __init__(self, reference_store: IReferenceStore | None = None):
        self._reference_store = reference_store

    async def _get_reference_store(self) -> IReferenceStore:
        if self._reference_store is None:
            from armory.infrastructure.storage.sqlite import get_reference_store

            self._reference_store = await get_reference_store()
        return self._reference_store

    async def list_all(self) -> list[Asset]:
        store = await self._get_reference_store()
        return await store.list_assets()

    async def get(self, asset_id: int) -> Asset:
        store = await self._get_reference_store()
        asset = await store.get_asset(asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_id)
        return asset

    async def create(self, request: AssetRequest, actor: Actor) -> Asset:
        require(actor, Operation.MANAGE_REFERENCE_DATA)
        store = await self._get_reference_store()
        return await store.create_asset(
            Asset(
                name=request.name,
                category=request.category,
                unit=request.unit,
                description=request.description,
            )
        )

    async def update(self, asset_id: int, request: AssetRequest, actor: Actor) -> Asset:
        require(actor, Operation.MANAGE_REFERENCE_DATA)
        asset = await self.get(asset_id)
        store = await self._get_reference_store()
        return await store.update_asset(
            asset.model_copy(
                update={
                    "name": request.name,
                    "category": request.category,
                    "unit": request.unit,
                    "description": request.description,
                }
            )
        )

    async def delete(self, asset_id: int, actor: Actor) -> bool:
        require(actor, Operation.MANAGE_REFERENCE_DATA)
        store = await self._get_reference_store()
        if not await store.delete_asset(asset_id):
            raise AssetNotFoundError(asset_id)
        return True

    @staticmethod
    def to_list_response(assets: list[Asset]) -> AssetListResponse:
        return AssetListResponse(assets=[AssetResponse.from_entity(a) for a in assets])

    @staticmethod
    def to_response(asset: Asset) -> AssetResponse:
        return AssetResponse.from_entity(asset)


class ManageBasesUseCase:
    """List and edit bases. Reads are open to every role."""

    def __init__(self, reference_store: IReferenceStore | None = None):
        self._reference_store = reference_store

    async def _get_reference_store(self) -> IReferenceStore:
        if self._reference_store is None:
            from armory.infrastructure.storage.sqlite import get_reference_store

            self._reference_store = await get_reference_store()
        return self._reference_store

    async def list_all(self) -> list[Base]:
        store = await self._get_reference_store()
        return await store.list_bases()

    async def get(self, base_id: int) -> Base:
        store = await self._get_reference_store()
        base = await store.get_base(base_id)
        if base is None:
            raise BaseNotFoundError(base_id)
        return base

    async def create(self, request: BaseRequest, actor: Actor) -> Base:
        require(actor, Operation.MANAGE_REFERENCE_DATA)
        store = await self._get_reference_store()
        return await store.create_base(
            Base(name=request.name, district=request.district, state=request.state)
        )

    async def update(self, base_id: int, request: BaseRequest, actor: Actor) -> Base:
        require(actor, Operation.MANAGE_REFERENCE_DATA)
        base = await self.get(base_id)
        store = await self._get_reference_store()
        return await store.update_base(
            base.model_copy(
                update={"name": request.name, "district": request.district, "state": request.state}
            )
        )

    async def delete(self, base_id: int, actor: Actor) -> bool:
        require(actor, Operation.MANAGE_REFERENCE_DATA)
        store = await self._get_reference_store()
        if not await store.delete_base(base_id):
            raise BaseNotFoundError(base_id)
        return True

    @staticmethod
    def to_list_response(bases: list[Base]) -> BaseListResponse:
        return BaseListResponse(bases=[BaseResponse.from_entity(b) for b in bases])

    @staticmethod
    def to_response(base: Base) -> BaseResponse:
        return BaseResponse.from_entity(base)
