"""Create Assignment Use Case: check stock out to a person."""

from functools import partial

from armory.application.dto.requests import CreateAssignmentRequest
from armory.application.dto.responses import AssignmentResponse
from armory.application.use_cases.scope import business_date, require, resolve_base
from armory.core.entities.access import Actor, Operation
from armory.core.entities.transaction import Assignment, AssignmentItem
from armory.core.interfaces.ledger_store import ILedgerStore
from armory.core.services.inventory_ledger import require_stock


class CreateAssignmentUseCase:
    """
    Assign asset quantities at a base to a named person.

    Assigned stock stays on the base's books (``quantity`` is unchanged)
    but is no longer available until it is expended.
    """

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from armory.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: CreateAssignmentRequest, actor: Actor) -> Assignment:
        require(actor, Operation.CREATE_ASSIGNMENT)
        base_id = resolve_base(actor, request.base_id)

        assignment = Assignment(
            base_id=base_id,
            assigned_to=request.assigned_to,
            assign_date=business_date(request.assign_date),
            items=[
                AssignmentItem(asset_id=i.asset_id, quantity=i.quantity) for i in request.items
            ],
            remarks=request.remarks,
            created_by=actor.name,
        )

        store = await self._get_ledger_store()
        guard = partial(require_stock, draw=assignment)
        return await store.create_assignment(assignment, guard=guard)

    def to_response(self, assignment: Assignment) -> AssignmentResponse:
        return AssignmentResponse.from_entity(assignment)
