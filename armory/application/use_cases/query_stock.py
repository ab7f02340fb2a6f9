"""Query Stock Use Case: point-in-time inventory per (base, asset)."""

from dataclasses import dataclass

from armory.application.dto.requests import StockQuery
from armory.application.dto.responses import BaseResponse, StockListResponse, StockResponse
from armory.application.use_cases.scope import require, resolve_base
from armory.config import get_logger, get_settings
from armory.core.entities.access import Actor, Operation
from armory.core.entities.inventory import InventoryStock
from armory.core.entities.reference import Asset, Base
from armory.core.entities.transaction import Transfer
from armory.core.exceptions import BaseNotFoundError, InvalidDateRangeError, ValidationError
from armory.core.interfaces.ledger_store import ILedgerStore
from armory.core.interfaces.reference_store import IReferenceStore
from armory.core.services.inventory_ledger import InventoryLedger, in_window

logger = get_logger(__name__)

# Wire sort field to row attribute
STOCK_SORT_FIELDS = {
    "assetName": "asset_name",
    "quantity": "quantity",
    "purchased": "purchased",
    "assigned": "assigned",
    "expended": "expended",
    "transferredIn": "transferred_in",
    "transferredOut": "transferred_out",
    "available": "available",
}


@dataclass
class StockResult:
    rows: list[StockResponse]
    base: Base | None


class QueryStockUseCase:
    """Replay the ledger up to a day and list matching stock rows."""

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        reference_store: IReferenceStore | None = None,
        low_stock_threshold: int | None = None,
    ):
        self._ledger_store = ledger_store
        self._reference_store = reference_store
        self._threshold = (
            low_stock_threshold
            if low_stock_threshold is not None
            else get_settings().ledger.low_stock_threshold
        )

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from armory.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def _get_reference_store(self) -> IReferenceStore:
        if self._reference_store is None:
            from armory.infrastructure.storage.sqlite import get_reference_store

            self._reference_store = await get_reference_store()
        return self._reference_store

    async def execute(self, query: StockQuery, actor: Actor) -> StockResult:
        require(actor, Operation.VIEW_STOCK)
        if query.date_from and query.date_to and query.date_from > query.date_to:
            raise InvalidDateRangeError(query.date_from, query.date_to)
        if query.sort_field and query.sort_field not in STOCK_SORT_FIELDS:
            raise ValidationError("sortField", "unsupported sort field", query.sort_field)

        base_id = resolve_base(actor, query.base_id, required=False)
        refs = await self._get_reference_store()
        base = None
        if base_id is not None:
            base = await refs.get_base(base_id)
            if base is None:
                raise BaseNotFoundError(base_id)
        assets = {asset.id: asset for asset in await refs.list_assets()}

        store = await self._get_ledger_store()
        transactions = await store.list_transactions(base_id=base_id)
        ledger = InventoryLedger.replay(transactions, until=query.date_to)
        stocks = ledger.stocks_for_base(base_id) if base_id is not None else ledger.all_stocks()

        active = None
        if query.date_from is not None:
            active = _active_pairs(transactions, query)

        rows = [
            StockResponse.from_entity(stock, assets.get(stock.asset_id), self._threshold)
            for stock in stocks
            if self._matches(stock, assets.get(stock.asset_id), query, active)
        ]
        if query.sort_field:
            attr = STOCK_SORT_FIELDS[query.sort_field]
            rows.sort(key=_sort_key(attr), reverse=query.sort_direction == "desc")

        logger.info("stock_queried", base_id=base_id, rows=len(rows), as_of=str(query.date_to))
        return StockResult(rows=rows, base=base)

    def _matches(
        self,
        stock: InventoryStock,
        asset: Asset | None,
        query: StockQuery,
        active: set[tuple[int, int]] | None,
    ) -> bool:
        if query.asset_id is not None and stock.asset_id != query.asset_id:
            return False
        if query.category is not None and (asset is None or asset.category != query.category):
            return False
        if query.search and (asset is None or query.search.lower() not in asset.name.lower()):
            return False
        if query.min_quantity is not None and stock.quantity < query.min_quantity:
            return False
        if query.max_quantity is not None and stock.quantity > query.max_quantity:
            return False
        if query.show_low_stock and stock.quantity > self._threshold:
            return False
        if active is not None and (stock.base_id, stock.asset_id) not in active:
            return False
        return True

    def to_response(self, result: StockResult) -> StockListResponse:
        return StockListResponse(
            stocks=result.rows,
            base=BaseResponse.from_entity(result.base) if result.base else None,
        )


def _active_pairs(transactions, query: StockQuery) -> set[tuple[int, int]]:
    """(base, asset) pairs that moved inside the query window."""
    pairs: set[tuple[int, int]] = set()
    for txn in transactions:
        if not in_window(txn.occurred_at.date(), query.date_from, query.date_to):
            continue
        bases = (txn.from_base_id, txn.to_base_id) if isinstance(txn, Transfer) else (txn.base_id,)
        for base_id in bases:
            for asset_id in txn.asset_ids():
                pairs.add((base_id, asset_id))
    return pairs


def _sort_key(attr: str):
    if attr == "asset_name":
        return lambda row: (row.asset_name or "").lower()
    return lambda row: getattr(row, attr)
