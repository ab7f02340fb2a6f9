"""Tests for CreateAssignmentUseCase and MarkAssignmentExpendedUseCase."""

from unittest.mock import AsyncMock

import pytest

from armory.application.dto.requests import (
    CreateAssignmentRequest,
    ExpendItemRequest,
    LineItemRequest,
    MarkExpendedRequest,
)
from armory.application.use_cases import CreateAssignmentUseCase, MarkAssignmentExpendedUseCase
from armory.core.entities import AssignmentItem, AssignmentStatus
from armory.core.exceptions import (
    AssignmentNotFoundError,
    InsufficientStockError,
    InvalidStateTransitionError,
    PermissionDeniedError,
    ValidationError,
)


@pytest.fixture
def two_item_assignment(make_assignment):
    return make_assignment(
        id=3,
        items=[
            AssignmentItem(id=1, asset_id=1, quantity=10),
            AssignmentItem(id=2, asset_id=2, quantity=4),
        ],
    )


@pytest.fixture
def store(two_item_assignment):
    store = AsyncMock()
    store.get_assignment.return_value = two_item_assignment
    store.expend_assignment_items.side_effect = lambda aid, ids, exp: exp.model_copy(
        update={"id": 11}
    )
    return store


def _expend(*item_ids: int, **kwargs) -> MarkExpendedRequest:
    return MarkExpendedRequest(
        expended_by="Pvt. Das",
        items=[ExpendItemRequest(item_id=item_id) for item_id in item_ids],
        **kwargs,
    )


class TestCreateAssignment:
    @pytest.mark.asyncio
    async def test_assignment_starts_active(self, commander, make_purchase):
        store = AsyncMock()

        def create(assignment, guard):
            guard([make_purchase()])
            return assignment.model_copy(update={"id": 1})

        store.create_assignment.side_effect = create
        assignment = await CreateAssignmentUseCase(ledger_store=store).execute(
            CreateAssignmentRequest(
                assigned_to="Sgt. Rao",
                items=[LineItemRequest(asset_id=1, quantity=10)],
            ),
            commander,
        )

        assert assignment.status == AssignmentStatus.ACTIVE
        assert not assignment.is_expended

    @pytest.mark.asyncio
    async def test_cannot_assign_assigned_stock(self, commander, make_purchase, make_assignment):
        store = AsyncMock()

        def create(assignment, guard):
            guard([make_purchase(items={1: 10}), make_assignment()])

        store.create_assignment.side_effect = create
        with pytest.raises(InsufficientStockError):
            await CreateAssignmentUseCase(ledger_store=store).execute(
                CreateAssignmentRequest(
                    assigned_to="Sgt. Rao",
                    items=[LineItemRequest(asset_id=1, quantity=1)],
                ),
                commander,
            )


class TestMarkAssignmentExpended:
    @pytest.mark.asyncio
    async def test_partial_then_status(self, commander, store):
        result = await MarkAssignmentExpendedUseCase(ledger_store=store).execute(
            3, _expend(1), commander
        )

        assert result.previous_status == AssignmentStatus.ACTIVE
        assert result.assignment.status == AssignmentStatus.PARTIALLY_EXPENDED
        assert result.expenditure.assignment_id == 3
        assert result.expenditure.id == 11
        store.expend_assignment_items.assert_awaited_once()
        assert store.expend_assignment_items.await_args.args[1] == [1]

    @pytest.mark.asyncio
    async def test_all_items_expends_assignment(self, commander, store):
        uc = MarkAssignmentExpendedUseCase(ledger_store=store)
        result = await uc.execute(3, _expend(1, 2), commander)

        assert result.assignment.is_expended
        response = uc.to_response(result)
        assert response.assignment_status == AssignmentStatus.EXPENDED
        assert response.model_dump(by_alias=True)["assignment"] == 3

    @pytest.mark.asyncio
    async def test_unknown_assignment(self, commander):
        store = AsyncMock()
        store.get_assignment.return_value = None
        with pytest.raises(AssignmentNotFoundError):
            await MarkAssignmentExpendedUseCase(ledger_store=store).execute(
                99, _expend(1), commander
            )

    @pytest.mark.asyncio
    async def test_logistics_cannot_expend(self, logistics, store):
        with pytest.raises(PermissionDeniedError):
            await MarkAssignmentExpendedUseCase(ledger_store=store).execute(
                3, _expend(1), logistics
            )
        store.get_assignment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mismatched_base(self, admin, store):
        with pytest.raises(ValidationError):
            await MarkAssignmentExpendedUseCase(ledger_store=store).execute(
                3, _expend(1, base_id=2), admin
            )

    @pytest.mark.asyncio
    async def test_already_expended_item_writes_nothing(
        self, commander, store, two_item_assignment
    ):
        two_item_assignment.items[0].is_expended = True
        with pytest.raises(InvalidStateTransitionError):
            await MarkAssignmentExpendedUseCase(ledger_store=store).execute(
                3, _expend(1), commander
            )
        store.expend_assignment_items.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_race_propagates(self, commander, store):
        store.expend_assignment_items.side_effect = InvalidStateTransitionError(
            3, "items already expended"
        )
        with pytest.raises(InvalidStateTransitionError):
            await MarkAssignmentExpendedUseCase(ledger_store=store).execute(
                3, _expend(1), commander
            )
