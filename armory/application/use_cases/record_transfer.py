"""Record Transfer Use Case: move stock between two bases."""

from functools import partial

from armory.application.dto.requests import CreateTransferRequest
from armory.application.dto.responses import TransferResponse
from armory.application.use_cases.scope import business_date, require, resolve_base
from armory.config import get_logger
from armory.core.entities.access import Actor, Operation
from armory.core.entities.transaction import LineItem, Transfer
from armory.core.exceptions import ValidationError
from armory.core.interfaces.ledger_store import ILedgerStore
from armory.core.services.inventory_ledger import require_stock

logger = get_logger(__name__)


class RecordTransferUseCase:
    """
    Record a transfer out of the actor's base.

    One transaction, two views: the source loses what the destination
    gains. The source must hold enough unassigned stock.
    """

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from armory.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: CreateTransferRequest, actor: Actor) -> Transfer:
        require(actor, Operation.RECORD_TRANSFER)
        from_base_id = resolve_base(actor, request.from_base_id)
        if from_base_id == request.to_base_id:
            raise ValidationError(
                "toBase", "source and destination base must differ", request.to_base_id
            )

        transfer = Transfer(
            from_base_id=from_base_id,
            to_base_id=request.to_base_id,
            transfer_date=business_date(request.transfer_date),
            invoice_number=request.invoice_number,
            items=[LineItem(asset_id=i.asset_id, quantity=i.quantity) for i in request.items],
            remarks=request.remarks,
            created_by=actor.name,
        )

        store = await self._get_ledger_store()
        guard = partial(require_stock, draw=transfer)
        return await store.create_transfer(transfer, guard=guard)

    def to_response(self, transfer: Transfer) -> TransferResponse:
        return TransferResponse.from_entity(transfer)
