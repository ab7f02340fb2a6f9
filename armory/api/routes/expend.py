"""Expenditure endpoints, including assignment fulfillment."""

from fastapi import APIRouter, Depends, status

from armory.api.dependencies import (
    get_actor,
    get_mark_expended_use_case,
    get_record_expenditure_use_case,
    get_transaction,
    list_transactions,
    query_params,
)
from armory.application.dto.requests import (
    CreateExpenditureRequest,
    MarkExpendedRequest,
    TransactionListQuery,
)
from armory.application.dto.responses import (
    ErrorResponse,
    ExpenditureListResponse,
    ExpenditureResponse,
)
from armory.application.use_cases import (
    GetTransactionUseCase,
    ListTransactionsUseCase,
    MarkAssignmentExpendedUseCase,
    RecordExpenditureUseCase,
)
from armory.core.entities.access import Actor
from armory.core.entities.transaction import TransactionKind

router = APIRouter(prefix="/api/expend", tags=["expenditures"])


@router.post(
    "/create",
    response_model=ExpenditureResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_expenditure(
    request: CreateExpenditureRequest,
    actor: Actor = Depends(get_actor),
    use_case: RecordExpenditureUseCase = Depends(get_record_expenditure_use_case),
) -> ExpenditureResponse:
    """Record stock consumed directly from a base."""
    expenditure = await use_case.execute(request, actor)
    return use_case.to_response(expenditure)


@router.post(
    "/markAssignedAsExpended/{assignment_id}",
    response_model=ExpenditureResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def mark_assigned_as_expended(
    assignment_id: int,
    request: MarkExpendedRequest,
    actor: Actor = Depends(get_actor),
    use_case: MarkAssignmentExpendedUseCase = Depends(get_mark_expended_use_case),
) -> ExpenditureResponse:
    """
    Expend selected line items of an assignment.

    Creates one expenditure linked to the assignment. Items already
    expended, or an assignment already fully expended, give 409.
    """
    result = await use_case.execute(assignment_id, request, actor)
    return use_case.to_response(result)


@router.get("/getMy", response_model=ExpenditureListResponse)
async def list_expenditures(
    query: TransactionListQuery = Depends(query_params(TransactionListQuery)),
    actor: Actor = Depends(get_actor),
    use_case: ListTransactionsUseCase = Depends(list_transactions(TransactionKind.EXPENDITURE)),
) -> ExpenditureListResponse:
    page = await use_case.execute(query, actor)
    return use_case.to_response(page)


@router.get(
    "/get/{expenditure_id}",
    response_model=ExpenditureResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_expenditure(
    expenditure_id: int,
    actor: Actor = Depends(get_actor),
    use_case: GetTransactionUseCase = Depends(get_transaction(TransactionKind.EXPENDITURE)),
) -> ExpenditureResponse:
    expenditure = await use_case.execute(expenditure_id, actor)
    return use_case.to_response(expenditure)
