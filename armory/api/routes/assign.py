"""Assignment endpoints."""

from fastapi import APIRouter, Depends, status

from armory.api.dependencies import (
    get_actor,
    get_create_assignment_use_case,
    get_transaction,
    list_transactions,
    query_params,
)
from armory.application.dto.requests import CreateAssignmentRequest, TransactionListQuery
from armory.application.dto.responses import (
    AssignmentListResponse,
    AssignmentResponse,
    ErrorResponse,
)
from armory.application.use_cases import (
    CreateAssignmentUseCase,
    GetTransactionUseCase,
    ListTransactionsUseCase,
)
from armory.core.entities.access import Actor
from armory.core.entities.transaction import TransactionKind

router = APIRouter(prefix="/api/assign", tags=["assignments"])


@router.post(
    "/create",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_assignment(
    request: CreateAssignmentRequest,
    actor: Actor = Depends(get_actor),
    use_case: CreateAssignmentUseCase = Depends(get_create_assignment_use_case),
) -> AssignmentResponse:
    """Check stock out to a person. Fails if the base lacks available stock."""
    assignment = await use_case.execute(request, actor)
    return use_case.to_response(assignment)


@router.get("/getMy", response_model=AssignmentListResponse)
async def list_assignments(
    query: TransactionListQuery = Depends(query_params(TransactionListQuery)),
    actor: Actor = Depends(get_actor),
    use_case: ListTransactionsUseCase = Depends(list_transactions(TransactionKind.ASSIGNMENT)),
) -> AssignmentListResponse:
    page = await use_case.execute(query, actor)
    return use_case.to_response(page)


@router.get(
    "/get/{assignment_id}",
    response_model=AssignmentResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_assignment(
    assignment_id: int,
    actor: Actor = Depends(get_actor),
    use_case: GetTransactionUseCase = Depends(get_transaction(TransactionKind.ASSIGNMENT)),
) -> AssignmentResponse:
    assignment = await use_case.execute(assignment_id, actor)
    return use_case.to_response(assignment)
