"""Query Summary Use Case: windowed ledger and dashboard totals."""

from dataclasses import dataclass

from armory.application.dto.requests import SummaryQuery
from armory.application.dto.responses import (
    AssetSummaryResponse,
    BaseResponse,
    DashboardTotalsResponse,
    SummaryResponse,
)
from armory.application.use_cases.scope import require, resolve_base
from armory.config import get_logger
from armory.core.entities.access import Actor, Operation
from armory.core.entities.inventory import AssetSummary, DashboardTotals
from armory.core.entities.reference import Asset, Base
from armory.core.exceptions import BaseNotFoundError
from armory.core.interfaces.ledger_store import ILedgerStore
from armory.core.interfaces.reference_store import IReferenceStore
from armory.core.services.dashboard import DashboardAggregator, resolve_window

logger = get_logger(__name__)


@dataclass
class SummaryResult:
    summaries: list[AssetSummary]
    totals: DashboardTotals
    base: Base | None
    assets: dict[int, Asset]


class QuerySummaryUseCase:
    """
    Per-asset opening/closing balances for a window, plus totals.

    Admins without a base get the fleet view: rows merged across bases.
    """

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        reference_store: IReferenceStore | None = None,
        aggregator: DashboardAggregator | None = None,
    ):
        self._ledger_store = ledger_store
        self._reference_store = reference_store
        self._aggregator = aggregator or DashboardAggregator()

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

    async def execute(self, query: SummaryQuery, actor: Actor) -> SummaryResult:
        require(actor, Operation.VIEW_DASHBOARD)
        date_from, date_to = resolve_window(query.as_of, query.date_from, query.date_to)
        base_id = resolve_base(actor, query.base_id, required=False)

        refs = await self._get_reference_store()
        assets = {asset.id: asset for asset in await refs.list_assets()}
        asset_ids = None
        if query.category is not None:
            asset_ids = {aid for aid, asset in assets.items() if asset.category == query.category}

        store = await self._get_ledger_store()
        if base_id is not None:
            base = await refs.get_base(base_id)
            if base is None:
                raise BaseNotFoundError(base_id)
            transactions = await store.list_transactions(base_id=base_id)
            summaries, totals = self._aggregator.summarize(
                transactions, base_id, date_from, date_to, asset_ids
            )
        else:
            base = None
            transactions = await store.list_transactions()
            base_ids = [b.id for b in await refs.list_bases()]
            summaries, totals = self._aggregator.summarize_fleet(
                transactions, base_ids, date_from, date_to, asset_ids
            )

        logger.info(
            "summary_queried",
            base_id=base_id,
            date_from=str(date_from),
            date_to=str(date_to),
            assets=len(summaries),
            net_movements=totals.total_net_movements,
        )
        return SummaryResult(summaries=summaries, totals=totals, base=base, assets=assets)

    def to_response(self, result: SummaryResult) -> SummaryResponse:
        return SummaryResponse(
            summaries=[
                AssetSummaryResponse.from_entity(s, result.assets.get(s.asset_id))
                for s in result.summaries
            ],
            totals=DashboardTotalsResponse.from_entity(result.totals),
            base=BaseResponse.from_entity(result.base) if result.base else None,
        )
