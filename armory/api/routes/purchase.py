"""Purchase endpoints."""

from fastapi import APIRouter, Depends, status

from armory.api.dependencies import (
    get_actor,
    get_record_purchase_use_case,
    get_transaction,
    get_update_purchase_use_case,
    list_transactions,
    query_params,
)
from armory.application.dto.requests import (
    CreatePurchaseRequest,
    TransactionListQuery,
    UpdatePurchaseRequest,
)
from armory.application.dto.responses import (
    ErrorResponse,
    PurchaseListResponse,
    PurchaseResponse,
)
from armory.application.use_cases import (
    GetTransactionUseCase,
    ListTransactionsUseCase,
    RecordPurchaseUseCase,
    UpdatePurchaseUseCase,
)
from armory.core.entities.access import Actor
from armory.core.entities.transaction import TransactionKind

router = APIRouter(prefix="/api/purchase", tags=["purchase"])


@router.post(
    "/create",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_purchase(
    request: CreatePurchaseRequest,
    actor: Actor = Depends(get_actor),
    use_case: RecordPurchaseUseCase = Depends(get_record_purchase_use_case),
) -> PurchaseResponse:
    """Record stock arriving at a base."""
    purchase = await use_case.execute(request, actor)
    return use_case.to_response(purchase)


@router.put(
    "/update/{purchase_id}",
    response_model=PurchaseResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_purchase(
    purchase_id: int,
    request: UpdatePurchaseRequest,
    actor: Actor = Depends(get_actor),
    use_case: UpdatePurchaseUseCase = Depends(get_update_purchase_use_case),
) -> PurchaseResponse:
    """Correct a purchase. Rejected if any later balance would go negative."""
    purchase = await use_case.execute(purchase_id, request, actor)
    return use_case.to_response(purchase)


@router.get("/getMy", response_model=PurchaseListResponse)
async def list_purchases(
    query: TransactionListQuery = Depends(query_params(TransactionListQuery)),
    actor: Actor = Depends(get_actor),
    use_case: ListTransactionsUseCase = Depends(list_transactions(TransactionKind.PURCHASE)),
) -> PurchaseListResponse:
    page = await use_case.execute(query, actor)
    return use_case.to_response(page)


@router.get(
    "/get/{purchase_id}",
    response_model=PurchaseResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_purchase(
    purchase_id: int,
    actor: Actor = Depends(get_actor),
    use_case: GetTransactionUseCase = Depends(get_transaction(TransactionKind.PURCHASE)),
) -> PurchaseResponse:
    purchase = await use_case.execute(purchase_id, actor)
    return use_case.to_response(purchase)
