"""Record Purchase Use Case: strictly additive receipt at a base."""

from armory.application.dto.requests import CreatePurchaseRequest, UpdatePurchaseRequest
from armory.application.dto.responses import PurchaseResponse
from armory.application.use_cases.scope import business_date, require, resolve_base
from armory.config import get_logger
from armory.core.entities.access import Actor, Operation
from armory.core.entities.transaction import LineItem, Purchase
from armory.core.exceptions import PurchaseNotFoundError
from armory.core.interfaces.ledger_store import ILedgerStore
from armory.core.services.inventory_ledger import require_non_negative

logger = get_logger(__name__)


class RecordPurchaseUseCase:
    """Record a purchase of assets into a base's stock."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from armory.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: CreatePurchaseRequest, actor: Actor) -> Purchase:
        require(actor, Operation.RECORD_PURCHASE)
        base_id = resolve_base(actor, request.base_id)

        purchase = Purchase(
            base_id=base_id,
            purchase_date=business_date(request.purchase_date),
            invoice_number=request.invoice_number,
            items=[LineItem(asset_id=i.asset_id, quantity=i.quantity) for i in request.items],
            remarks=request.remarks,
            created_by=actor.name,
        )

        store = await self._get_ledger_store()
        return await store.create_purchase(purchase)

    def to_response(self, purchase: Purchase) -> PurchaseResponse:
        return PurchaseResponse.from_entity(purchase)


class UpdatePurchaseUseCase:
    """
    Correct a recorded purchase.

    Rejected if the corrected ledger would leave any base with less stock
    than has already been transferred, assigned or expended.
    """

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from armory.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(
        self,
        purchase_id: int,
        request: UpdatePurchaseRequest,
        actor: Actor,
    ) -> Purchase:
        require(actor, Operation.UPDATE_PURCHASE)
        store = await self._get_ledger_store()

        existing = await store.get_purchase(purchase_id)
        if existing is None:
            raise PurchaseNotFoundError(purchase_id)
        # Both the old and the new base must be within the actor's reach
        resolve_base(actor, existing.base_id)
        base_id = resolve_base(actor, request.base_id or existing.base_id)

        updated = Purchase(
            id=existing.id,
            base_id=base_id,
            purchase_date=request.purchase_date or existing.purchase_date,
            invoice_number=request.invoice_number,
            items=[LineItem(asset_id=i.asset_id, quantity=i.quantity) for i in request.items],
            remarks=request.remarks,
            created_by=existing.created_by,
            created_at=existing.created_at,
        )
        purchase = await store.update_purchase(updated, guard=require_non_negative)

        logger.info(
            "purchase_corrected",
            purchase_id=purchase_id,
            old_quantity=existing.total_quantity,
            new_quantity=purchase.total_quantity,
            actor=actor.name,
        )
        return purchase

    def to_response(self, purchase: Purchase) -> PurchaseResponse:
        return PurchaseResponse.from_entity(purchase)
