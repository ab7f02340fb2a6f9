"""Read-only ledger views: stock, movement log and dashboard summary."""

from fastapi import APIRouter, Depends

from armory.api.dependencies import (
    get_actor,
    get_query_movements_use_case,
    get_query_stock_use_case,
    get_query_summary_use_case,
    query_params,
)
from armory.application.dto.requests import MovementQuery, StockQuery, SummaryQuery
from armory.application.dto.responses import (
    ErrorResponse,
    MovementListResponse,
    StockListResponse,
    SummaryResponse,
)
from armory.application.use_cases import (
    QueryMovementsUseCase,
    QueryStockUseCase,
    QuerySummaryUseCase,
)
from armory.core.entities.access import Actor

router = APIRouter(prefix="/api", tags=["views"])

_VIEW_ERRORS = {400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}}


@router.get("/stocks/my", response_model=StockListResponse, responses=_VIEW_ERRORS)
async def my_stock(
    query: StockQuery = Depends(query_params(StockQuery)),
    actor: Actor = Depends(get_actor),
    use_case: QueryStockUseCase = Depends(get_query_stock_use_case),
) -> StockListResponse:
    """
    Current stock per asset at the caller's base.

    Replays the ledger up to ``dateTo`` (or now). Admins may pass ``baseId``.
    """
    result = await use_case.execute(query, actor)
    return use_case.to_response(result)


@router.get("/movement", response_model=MovementListResponse, responses=_VIEW_ERRORS)
async def movement_log(
    query: MovementQuery = Depends(query_params(MovementQuery)),
    actor: Actor = Depends(get_actor),
    use_case: QueryMovementsUseCase = Depends(get_query_movements_use_case),
) -> MovementListResponse:
    """Unified log of purchases, transfers, assignments and expenditures."""
    page = await use_case.execute(query, actor)
    return use_case.to_response(page)


@router.get("/summary", response_model=SummaryResponse, responses=_VIEW_ERRORS)
async def summary(
    query: SummaryQuery = Depends(query_params(SummaryQuery)),
    actor: Actor = Depends(get_actor),
    use_case: QuerySummaryUseCase = Depends(get_query_summary_use_case),
) -> SummaryResponse:
    """Opening/closing balances per asset for a window, with totals."""
    result = await use_case.execute(query, actor)
    return use_case.to_response(result)
