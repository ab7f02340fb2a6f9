"""Query Movements Use Case: unified, filtered movement log."""

from armory.application.dto.requests import MovementQuery
from armory.application.dto.responses import MovementListResponse, MovementLogResponse
from armory.application.use_cases.scope import require, resolve_base
from armory.config import get_logger, get_settings
from armory.core.entities.access import Actor, Operation
from armory.core.interfaces.ledger_store import ILedgerStore
from armory.core.interfaces.reference_store import IReferenceStore
from armory.core.services.movement_log import MovementFilter, MovementLogCompiler, MovementPage

logger = get_logger(__name__)


class QueryMovementsUseCase:
    """Compile the movement log and return one page of it."""

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        reference_store: IReferenceStore | None = None,
    ):
        self._ledger_store = ledger_store
        self._reference_store = reference_store
        self._settings = get_settings()

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

    async def execute(self, query: MovementQuery, actor: Actor) -> MovementPage:
        require(actor, Operation.VIEW_MOVEMENTS)
        base_id = resolve_base(actor, query.base_id, required=False)

        criteria = MovementFilter(
            asset_id=query.asset_id,
            base_id=base_id,
            date_from=query.date_from,
            date_to=query.date_to,
            action_type=query.action_type,
            performed_by=query.performed_by,
            search=query.search,
        )

        asset_names: dict[int, str] = {}
        if query.search:
            refs = await self._get_reference_store()
            asset_names = {asset.id: asset.name for asset in await refs.list_assets()}

        store = await self._get_ledger_store()
        kinds = {query.action_type} if query.action_type else None
        transactions = await store.list_transactions(kinds=kinds, base_id=base_id)

        limit = min(
            query.limit or self._settings.api.default_page_size,
            self._settings.api.max_page_size,
        )
        page = MovementLogCompiler(asset_names).query(
            transactions,
            criteria,
            sort_by=query.sort_field,
            descending=query.sort_direction == "desc",
            page=query.page,
            limit=limit,
        )

        logger.info(
            "movements_queried",
            base_id=base_id,
            action_type=query.action_type.value if query.action_type else None,
            total=page.total,
            page=page.page,
        )
        return page

    def to_response(self, page: MovementPage) -> MovementListResponse:
        return MovementListResponse(
            logs=[MovementLogResponse.from_entity(entry) for entry in page.logs],
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
        )
