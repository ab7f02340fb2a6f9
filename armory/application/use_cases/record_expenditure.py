"""Record Expenditure Use Case: direct consumption not tied to an assignment."""

from functools import partial

from armory.application.dto.requests import CreateExpenditureRequest
from armory.application.dto.responses import ExpenditureResponse
from armory.application.use_cases.scope import business_date, require, resolve_base
from armory.core.entities.access import Actor, Operation
from armory.core.entities.transaction import Expenditure, LineItem
from armory.core.interfaces.ledger_store import ILedgerStore
from armory.core.services.inventory_ledger import require_stock


class RecordExpenditureUseCase:
    """Expend unassigned stock at a base."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from armory.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: CreateExpenditureRequest, actor: Actor) -> Expenditure:
        require(actor, Operation.RECORD_EXPENDITURE)
        base_id = resolve_base(actor, request.base_id)

        expenditure = Expenditure(
            base_id=base_id,
            expended_by=request.expended_by,
            expend_date=business_date(request.expend_date),
            items=[LineItem(asset_id=i.asset_id, quantity=i.quantity) for i in request.items],
            remarks=request.remarks,
            created_by=actor.name,
        )

        store = await self._get_ledger_store()
        guard = partial(require_stock, draw=expenditure)
        return await store.create_expenditure(expenditure, guard=guard)

    def to_response(self, expenditure: Expenditure) -> ExpenditureResponse:
        return ExpenditureResponse.from_entity(expenditure)
