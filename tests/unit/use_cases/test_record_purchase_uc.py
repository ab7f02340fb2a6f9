"""Tests for RecordPurchaseUseCase and UpdatePurchaseUseCase."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from armory.application.dto.requests import (
    CreatePurchaseRequest,
    LineItemRequest,
    UpdatePurchaseRequest,
)
from armory.application.use_cases import RecordPurchaseUseCase, UpdatePurchaseUseCase
from armory.core.exceptions import (
    InsufficientStockError,
    PermissionDeniedError,
    PurchaseNotFoundError,
)


def _echo(entity, **_):
    return entity.model_copy(update={"id": entity.id or 1})


def _request(quantity: int = 100, **kwargs) -> CreatePurchaseRequest:
    return CreatePurchaseRequest(
        invoice_number="INV-7",
        items=[LineItemRequest(asset_id=1, quantity=quantity)],
        purchase_date=datetime(2025, 1, 1, 9),
        **kwargs,
    )


class TestRecordPurchase:
    @pytest.mark.asyncio
    async def test_records_at_actors_base(self, logistics):
        store = AsyncMock()
        store.create_purchase.side_effect = _echo

        purchase = await RecordPurchaseUseCase(ledger_store=store).execute(_request(), logistics)

        assert purchase.id == 1
        assert purchase.base_id == 1
        assert purchase.created_by == "lo"
        assert purchase.total_quantity == 100

    @pytest.mark.asyncio
    async def test_commander_cannot_purchase(self, commander):
        store = AsyncMock()
        with pytest.raises(PermissionDeniedError):
            await RecordPurchaseUseCase(ledger_store=store).execute(_request(), commander)
        store.create_purchase.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_base_rejected(self, logistics):
        with pytest.raises(PermissionDeniedError):
            await RecordPurchaseUseCase(ledger_store=AsyncMock()).execute(
                _request(base_id=2), logistics
            )

    @pytest.mark.asyncio
    async def test_admin_names_base(self, admin):
        store = AsyncMock()
        store.create_purchase.side_effect = _echo
        purchase = await RecordPurchaseUseCase(ledger_store=store).execute(
            _request(base_id=3), admin
        )
        assert purchase.base_id == 3


class TestUpdatePurchase:
    @pytest.mark.asyncio
    async def test_missing_purchase(self, logistics):
        store = AsyncMock()
        store.get_purchase.return_value = None
        with pytest.raises(PurchaseNotFoundError):
            await UpdatePurchaseUseCase(ledger_store=store).execute(
                9, UpdatePurchaseRequest(**_request().model_dump()), logistics
            )

    @pytest.mark.asyncio
    async def test_keeps_creation_fields(self, logistics, make_purchase):
        existing = make_purchase(id=4, created_by="someone")
        store = AsyncMock()
        store.get_purchase.return_value = existing
        store.update_purchase.side_effect = _echo

        request = UpdatePurchaseRequest(**_request(quantity=80).model_dump())
        purchase = await UpdatePurchaseUseCase(ledger_store=store).execute(4, request, logistics)

        assert purchase.id == 4
        assert purchase.created_by == "someone"
        assert purchase.created_at == existing.created_at
        assert purchase.total_quantity == 80

    @pytest.mark.asyncio
    async def test_guard_rejects_overdrawn_correction(
        self, logistics, make_purchase, make_transfer
    ):
        existing = make_purchase(id=4)
        store = AsyncMock()
        store.get_purchase.return_value = existing

        def update(purchase, guard):
            # 50 already transferred out; correcting down to 20 would go negative
            guard([purchase, make_transfer(items={1: 50})])
            return purchase

        store.update_purchase.side_effect = update
        request = UpdatePurchaseRequest(**_request(quantity=20).model_dump())

        with pytest.raises(InsufficientStockError):
            await UpdatePurchaseUseCase(ledger_store=store).execute(4, request, logistics)
