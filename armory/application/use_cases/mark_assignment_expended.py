"""Mark Assignment Expended Use Case: fulfil assignment line items."""

from dataclasses import dataclass

from armory.application.dto.requests import MarkExpendedRequest
from armory.application.dto.responses import ExpenditureResponse
from armory.application.use_cases.scope import business_date, require, resolve_base
from armory.config import get_logger
from armory.core.entities.access import Actor, Operation
from armory.core.entities.transaction import Assignment, AssignmentStatus, Expenditure
from armory.core.exceptions import AssignmentNotFoundError, ValidationError
from armory.core.interfaces.ledger_store import ILedgerStore
from armory.core.services.assignment_fulfillment import (
    AssignmentFulfillment,
    ExpenditureDetails,
    ItemRef,
)

logger = get_logger(__name__)


@dataclass
class MarkExpendedResult:
    """Saved expenditure and the assignment state it produced."""

    expenditure: Expenditure
    assignment: Assignment
    previous_status: AssignmentStatus


class MarkAssignmentExpendedUseCase:
    """
    Expend selected line items of an assignment.

    The state machine validates the selection against the stored
    assignment, then the store flips the flags conditionally. If another
    request expended any of the same items in between, the store rejects
    the write and nothing is saved.
    """

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        fulfillment: AssignmentFulfillment | None = None,
    ):
        self._ledger_store = ledger_store
        self._fulfillment = fulfillment or AssignmentFulfillment()

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from armory.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(
        self,
        assignment_id: int,
        request: MarkExpendedRequest,
        actor: Actor,
    ) -> MarkExpendedResult:
        require(actor, Operation.EXPEND_ASSIGNMENT)
        store = await self._get_ledger_store()

        assignment = await store.get_assignment(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)
        resolve_base(actor, assignment.base_id)
        if request.base_id is not None and request.base_id != assignment.base_id:
            raise ValidationError(
                "base", "base does not match the assignment's base", request.base_id
            )

        logger.info(
            "mark_expended_started",
            assignment_id=assignment_id,
            status=assignment.status.value,
            items=len(request.items),
        )

        result = self._fulfillment.mark_items_expended(
            assignment,
            [
                ItemRef(item_id=i.item_id, asset_id=i.asset_id, quantity=i.quantity)
                for i in request.items
            ],
            ExpenditureDetails(
                expended_by=request.expended_by,
                expend_date=business_date(request.expend_date),
                remarks=request.remarks,
                created_by=actor.name,
            ),
        )

        expenditure = await store.expend_assignment_items(
            assignment_id,
            [item.id for item in result.expended_items],
            result.expenditure,
        )

        logger.info(
            "mark_expended_complete",
            assignment_id=assignment_id,
            expenditure_id=expenditure.id,
            previous_status=result.previous_status.value,
            status=result.status.value,
        )
        return MarkExpendedResult(
            expenditure=expenditure,
            assignment=result.assignment,
            previous_status=result.previous_status,
        )

    def to_response(self, result: MarkExpendedResult) -> ExpenditureResponse:
        return ExpenditureResponse.from_entity(
            result.expenditure,
            assignment_status=result.assignment.status,
        )
