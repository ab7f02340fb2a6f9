"""Tests for RecordTransferUseCase and RecordExpenditureUseCase."""

from unittest.mock import AsyncMock

import pytest

from armory.application.dto.requests import (
    CreateExpenditureRequest,
    CreateTransferRequest,
    LineItemRequest,
)
from armory.application.use_cases import RecordExpenditureUseCase, RecordTransferUseCase
from armory.core.exceptions import InsufficientStockError, ValidationError


def _transfer_request(to_base_id: int = 2, quantity: int = 10) -> CreateTransferRequest:
    return CreateTransferRequest(
        to_base_id=to_base_id,
        invoice_number="TRF-9",
        items=[LineItemRequest(asset_id=1, quantity=quantity)],
    )


def _run_guard(ledger):
    def create(txn, guard):
        guard(ledger)
        return txn.model_copy(update={"id": 1})

    return create


class TestRecordTransfer:
    @pytest.mark.asyncio
    async def test_same_base_rejected(self, logistics):
        store = AsyncMock()
        with pytest.raises(ValidationError):
            await RecordTransferUseCase(ledger_store=store).execute(
                _transfer_request(to_base_id=1), logistics
            )
        store.create_transfer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_source_is_actors_base(self, logistics, make_purchase):
        store = AsyncMock()
        store.create_transfer.side_effect = _run_guard([make_purchase()])

        transfer = await RecordTransferUseCase(ledger_store=store).execute(
            _transfer_request(), logistics
        )

        assert (transfer.from_base_id, transfer.to_base_id) == (1, 2)
        assert store.create_transfer.await_args.kwargs["guard"] is not None

    @pytest.mark.asyncio
    async def test_guard_checks_available_stock(self, logistics, make_purchase, make_assignment):
        # 100 purchased, 10 assigned: only 90 available
        store = AsyncMock()
        store.create_transfer.side_effect = _run_guard([make_purchase(), make_assignment()])

        with pytest.raises(InsufficientStockError) as exc_info:
            await RecordTransferUseCase(ledger_store=store).execute(
                _transfer_request(quantity=95), logistics
            )
        assert exc_info.value.details["available"] == 90


class TestRecordExpenditure:
    @pytest.mark.asyncio
    async def test_direct_expenditure_has_no_assignment(self, commander, make_purchase):
        store = AsyncMock()
        store.create_expenditure.side_effect = _run_guard([make_purchase()])

        expenditure = await RecordExpenditureUseCase(ledger_store=store).execute(
            CreateExpenditureRequest(
                expended_by="Cpl. Iyer",
                items=[LineItemRequest(asset_id=1, quantity=5)],
            ),
            commander,
        )

        assert expenditure.assignment_id is None
        assert expenditure.base_id == 1

    @pytest.mark.asyncio
    async def test_cannot_expend_more_than_held(self, commander, make_purchase):
        store = AsyncMock()
        store.create_expenditure.side_effect = _run_guard([make_purchase(items={1: 3})])

        with pytest.raises(InsufficientStockError):
            await RecordExpenditureUseCase(ledger_store=store).execute(
                CreateExpenditureRequest(
                    expended_by="Cpl. Iyer",
                    items=[LineItemRequest(asset_id=1, quantity=5)],
                ),
                commander,
            )
