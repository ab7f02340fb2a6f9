"""
Async HTTP client for the ledger service.

Wraps ``httpx.AsyncClient``. Every call either returns a parsed response
DTO or raises a ``ClientError``: ``TransportFailureError`` when no answer
came back, ``ApiRejectedError`` carrying the server's own message for any
non-2xx answer, ``MalformedResponseError`` when a 2xx body does not parse.
There is no retry.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from armory.application.dto.requests import (
    AssetRequest,
    BaseRequest,
    CreateAssignmentRequest,
    CreateExpenditureRequest,
    CreatePurchaseRequest,
    CreateTransferRequest,
    MarkExpendedRequest,
    UpdatePurchaseRequest,
)
from armory.application.dto.responses import (
    AssetListResponse,
    AssetResponse,
    AssignmentListResponse,
    AssignmentResponse,
    BaseListResponse,
    BaseResponse,
    DeleteResponse,
    ExpenditureListResponse,
    ExpenditureResponse,
    HealthResponse,
    MovementListResponse,
    PurchaseListResponse,
    PurchaseResponse,
    StockListResponse,
    SummaryResponse,
    TransferListResponse,
    TransferResponse,
)
from armory.config import get_logger, get_settings
from armory.core.entities.access import Actor
from armory.core.exceptions import (
    ApiRejectedError,
    MalformedResponseError,
    TransportFailureError,
)
from armory.core.services.query_builder import FilterState, build_query

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

Query = FilterState | Mapping[str, Any] | None


def error_message(response: httpx.Response) -> str:
    """The server's message: ``error`` if present, else ``message``, verbatim."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return response.text.strip() or response.reason_phrase or f"HTTP {response.status_code}"


class ArmoryApiClient:
    """
    Typed client for every ledger service endpoint.

    Usage:
        async with ArmoryApiClient(actor=actor) as api:
            stocks = await api.get_my_stock(state)
    """

    def __init__(
        self,
        base_url: str | None = None,
        actor: Actor | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: Service root (default from settings)
            actor: Identity forwarded in the actor headers
            timeout: Transport timeout in seconds (default from settings)
            transport: Custom httpx transport (ASGI or mock in tests)
        """
        settings = get_settings()
        headers = {}
        if actor is not None:
            headers[settings.api.user_header] = actor.name
            headers[settings.api.role_header] = actor.role.value
            if actor.base_id is not None:
                headers[settings.api.base_header] = str(actor.base_id)

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.client.base_url,
            timeout=timeout if timeout is not None else settings.client.timeout,
            headers=headers,
            transport=transport,
        )

    async def __aenter__(self) -> "ArmoryApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # Plumbing

    async def _request(
        self,
        method: str,
        path: str,
        model: type[ResponseT],
        *,
        params: list[tuple[str, str]] | None = None,
        body: BaseModel | None = None,
    ) -> ResponseT:
        payload = body.model_dump(mode="json", by_alias=True, exclude_none=True) if body else None
        try:
            response = await self._client.request(method, path, params=params, json=payload)
        except httpx.TransportError as e:
            logger.warning("api_transport_failed", method=method, path=path, error=str(e))
            raise TransportFailureError(method, path, str(e) or type(e).__name__) from e

        if response.is_error:
            message = error_message(response)
            logger.info(
                "api_request_rejected",
                method=method,
                path=path,
                status_code=response.status_code,
                message=message,
            )
            raise ApiRejectedError(response.status_code, message, path)

        # JSON decode errors and pydantic validation errors are both ValueError
        try:
            return model.model_validate(response.json())
        except ValueError as e:
            logger.warning("api_response_malformed", method=method, path=path, error=str(e))
            raise MalformedResponseError(method, path, str(e)) from e

    @staticmethod
    def _params(query: Query, screen: str | None = None) -> list[tuple[str, str]]:
        if query is None:
            return []
        if isinstance(query, FilterState):
            return list(build_query(query, screen).items())
        return sorted((key, str(value)) for key, value in query.items() if value is not None)

    # Reference data

    async def list_assets(self) -> list[AssetResponse]:
        result = await self._request("GET", "/api/settings/assets/get", AssetListResponse)
        return result.assets

    async def get_asset(self, asset_id: int) -> AssetResponse:
        return await self._request("GET", f"/api/settings/assets/get/{asset_id}", AssetResponse)

    async def create_asset(self, request: AssetRequest) -> AssetResponse:
        return await self._request(
            "POST", "/api/settings/assets/create", AssetResponse, body=request
        )

    async def update_asset(self, asset_id: int, request: AssetRequest) -> AssetResponse:
        return await self._request(
            "PUT", f"/api/settings/assets/update/{asset_id}", AssetResponse, body=request
        )

    async def delete_asset(self, asset_id: int) -> DeleteResponse:
        return await self._request(
            "DELETE", f"/api/settings/assets/delete/{asset_id}", DeleteResponse
        )

    async def list_bases(self) -> list[BaseResponse]:
        result = await self._request("GET", "/api/settings/bases/get", BaseListResponse)
        return result.bases

    async def get_base(self, base_id: int) -> BaseResponse:
        return await self._request("GET", f"/api/settings/bases/get/{base_id}", BaseResponse)

    async def create_base(self, request: BaseRequest) -> BaseResponse:
        return await self._request("POST", "/api/settings/bases/create", BaseResponse, body=request)

    async def update_base(self, base_id: int, request: BaseRequest) -> BaseResponse:
        return await self._request(
            "PUT", f"/api/settings/bases/update/{base_id}", BaseResponse, body=request
        )

    async def delete_base(self, base_id: int) -> DeleteResponse:
        return await self._request("DELETE", f"/api/settings/bases/delete/{base_id}", DeleteResponse)

    # Transactions

    async def create_purchase(self, request: CreatePurchaseRequest) -> PurchaseResponse:
        return await self._request("POST", "/api/purchase/create", PurchaseResponse, body=request)

    async def update_purchase(
        self, purchase_id: int, request: UpdatePurchaseRequest
    ) -> PurchaseResponse:
        return await self._request(
            "PUT", f"/api/purchase/update/{purchase_id}", PurchaseResponse, body=request
        )

    async def get_purchase(self, purchase_id: int) -> PurchaseResponse:
        return await self._request("GET", f"/api/purchase/get/{purchase_id}", PurchaseResponse)

    async def list_purchases(self, query: Query = None) -> PurchaseListResponse:
        return await self._request(
            "GET", "/api/purchase/getMy", PurchaseListResponse,
            params=self._params(query, "purchases"),
        )

    async def create_transfer(self, request: CreateTransferRequest) -> TransferResponse:
        return await self._request("POST", "/api/transfers/create", TransferResponse, body=request)

    async def get_transfer(self, transfer_id: int) -> TransferResponse:
        return await self._request("GET", f"/api/transfers/get/{transfer_id}", TransferResponse)

    async def list_transfers(self, query: Query = None) -> TransferListResponse:
        return await self._request(
            "GET", "/api/transfers/getMy", TransferListResponse,
            params=self._params(query, "transfers"),
        )

    async def create_assignment(self, request: CreateAssignmentRequest) -> AssignmentResponse:
        return await self._request("POST", "/api/assign/create", AssignmentResponse, body=request)

    async def get_assignment(self, assignment_id: int) -> AssignmentResponse:
        return await self._request("GET", f"/api/assign/get/{assignment_id}", AssignmentResponse)

    async def list_assignments(self, query: Query = None) -> AssignmentListResponse:
        return await self._request(
            "GET", "/api/assign/getMy", AssignmentListResponse,
            params=self._params(query, "assignments"),
        )

    async def create_expenditure(self, request: CreateExpenditureRequest) -> ExpenditureResponse:
        return await self._request("POST", "/api/expend/create", ExpenditureResponse, body=request)

    async def get_expenditure(self, expenditure_id: int) -> ExpenditureResponse:
        return await self._request(
            "GET", f"/api/expend/get/{expenditure_id}", ExpenditureResponse
        )

    async def list_expenditures(self, query: Query = None) -> ExpenditureListResponse:
        return await self._request(
            "GET", "/api/expend/getMy", ExpenditureListResponse,
            params=self._params(query, "expenditures"),
        )

    async def mark_assigned_as_expended(
        self,
        assignment_id: int,
        request: MarkExpendedRequest,
    ) -> ExpenditureResponse:
        return await self._request(
            "POST",
            f"/api/expend/markAssignedAsExpended/{assignment_id}",
            ExpenditureResponse,
            body=request,
        )

    # Views

    async def get_my_stock(self, query: Query = None) -> StockListResponse:
        return await self._request(
            "GET", "/api/stocks/my", StockListResponse, params=self._params(query, "stock")
        )

    async def get_movements(self, query: Query = None) -> MovementListResponse:
        return await self._request(
            "GET", "/api/movement", MovementListResponse, params=self._params(query, "movement")
        )

    async def get_summary(self, query: Query = None) -> SummaryResponse:
        return await self._request(
            "GET", "/api/summary", SummaryResponse, params=self._params(query, "summary")
        )

    async def health(self) -> HealthResponse:
        return await self._request("GET", "/health", HealthResponse)
