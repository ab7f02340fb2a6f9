"""Inter-base transfer endpoints."""

from fastapi import APIRouter, Depends, status

from armory.api.dependencies import (
    get_actor,
    get_record_transfer_use_case,
    get_transaction,
    list_transactions,
    query_params,
)
from armory.application.dto.requests import CreateTransferRequest, TransactionListQuery
from armory.application.dto.responses import (
    ErrorResponse,
    TransferListResponse,
    TransferResponse,
)
from armory.application.use_cases import (
    GetTransactionUseCase,
    ListTransactionsUseCase,
    RecordTransferUseCase,
)
from armory.core.entities.access import Actor
from armory.core.entities.transaction import TransactionKind

router = APIRouter(prefix="/api/transfers", tags=["transfers"])


@router.post(
    "/create",
    response_model=TransferResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_transfer(
    request: CreateTransferRequest,
    actor: Actor = Depends(get_actor),
    use_case: RecordTransferUseCase = Depends(get_record_transfer_use_case),
) -> TransferResponse:
    """Move stock between two different bases."""
    transfer = await use_case.execute(request, actor)
    return use_case.to_response(transfer)


@router.get("/getMy", response_model=TransferListResponse)
async def list_transfers(
    query: TransactionListQuery = Depends(query_params(TransactionListQuery)),
    actor: Actor = Depends(get_actor),
    use_case: ListTransactionsUseCase = Depends(list_transactions(TransactionKind.TRANSFER)),
) -> TransferListResponse:
    """Transfers in or out of the caller's base."""
    page = await use_case.execute(query, actor)
    return use_case.to_response(page)


@router.get(
    "/get/{transfer_id}",
    response_model=TransferResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_transfer(
    transfer_id: int,
    actor: Actor = Depends(get_actor),
    use_case: GetTransactionUseCase = Depends(get_transaction(TransactionKind.TRANSFER)),
) -> TransferResponse:
    transfer = await use_case.execute(transfer_id, actor)
    return use_case.to_response(transfer)
