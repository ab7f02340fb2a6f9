"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer. The API
client parses the same models back from the wire.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from armory.application.dto.requests import CamelModel
from armory.core.entities.inventory import AssetSummary, DashboardTotals, InventoryStock
from armory.core.entities.movement import MovementLogEntry
from armory.core.entities.reference import Asset, AssetCategory, Base
from armory.core.entities.transaction import (
    Assignment,
    AssignmentStatus,
    Expenditure,
    Purchase,
    Transfer,
)

# --- Reference data ---


class AssetResponse(CamelModel):
    id: int
    name: str
    category: AssetCategory
    unit: str = "unit"
    description: str | None = None

    @classmethod
    def from_entity(cls, asset: Asset) -> "AssetResponse":
        return cls(
            id=asset.id,
            name=asset.name,
            category=asset.category,
            unit=asset.unit,
            description=asset.description,
        )


class BaseResponse(CamelModel):
    id: int
    name: str
    district: str
    state: str

    @classmethod
    def from_entity(cls, base: Base) -> "BaseResponse":
        return cls(id=base.id, name=base.name, district=base.district, state=base.state)


class AssetListResponse(CamelModel):
    assets: list[AssetResponse] = Field(default_factory=list)


class BaseListResponse(CamelModel):
    bases: list[BaseResponse] = Field(default_factory=list)


class DeleteResponse(CamelModel):
    id: int
    deleted: bool


# --- Ledger transactions ---


class LineItemResponse(CamelModel):
    asset_id: int = Field(..., alias="asset")
    quantity: int


class AssignmentItemResponse(LineItemResponse):
    id: int | None = None
    is_expended: bool = False


class PurchaseResponse(CamelModel):
    id: int
    base_id: int = Field(..., alias="base")
    purchase_date: datetime
    invoice_number: str
    items: list[LineItemResponse]
    remarks: str | None = None
    created_by: str
    created_at: datetime

    @classmethod
    def from_entity(cls, purchase: Purchase) -> "PurchaseResponse":
        return cls(
            id=purchase.id,
            base_id=purchase.base_id,
            purchase_date=purchase.purchase_date,
            invoice_number=purchase.invoice_number,
            items=[
                LineItemResponse(asset_id=i.asset_id, quantity=i.quantity) for i in purchase.items
            ],
            remarks=purchase.remarks,
            created_by=purchase.created_by,
            created_at=purchase.created_at,
        )


class TransferResponse(CamelModel):
    id: int
    from_base_id: int = Field(..., alias="fromBase")
    to_base_id: int = Field(..., alias="toBase")
    transfer_date: datetime
    invoice_number: str
    items: list[LineItemResponse]
    remarks: str | None = None
    created_by: str
    created_at: datetime

    @classmethod
    def from_entity(cls, transfer: Transfer) -> "TransferResponse":
        return cls(
            id=transfer.id,
            from_base_id=transfer.from_base_id,
            to_base_id=transfer.to_base_id,
            transfer_date=transfer.transfer_date,
            invoice_number=transfer.invoice_number,
            items=[
                LineItemResponse(asset_id=i.asset_id, quantity=i.quantity) for i in transfer.items
            ],
            remarks=transfer.remarks,
            created_by=transfer.created_by,
            created_at=transfer.created_at,
        )


class AssignmentResponse(CamelModel):
    id: int
    base_id: int = Field(..., alias="base")
    assigned_to: str
    assign_date: datetime
    items: list[AssignmentItemResponse]
    is_expended: bool
    status: AssignmentStatus
    remarks: str | None = None
    created_by: str
    created_at: datetime

    @classmethod
    def from_entity(cls, assignment: Assignment) -> "AssignmentResponse":
        return cls(
            id=assignment.id,
            base_id=assignment.base_id,
            assigned_to=assignment.assigned_to,
            assign_date=assignment.assign_date,
            items=[
                AssignmentItemResponse(
                    id=i.id,
                    asset_id=i.asset_id,
                    quantity=i.quantity,
                    is_expended=i.is_expended,
                )
                for i in assignment.items
            ],
            is_expended=assignment.is_expended,
            status=assignment.status,
            remarks=assignment.remarks,
            created_by=assignment.created_by,
            created_at=assignment.created_at,
        )


class ExpenditureResponse(CamelModel):
    id: int
    base_id: int = Field(..., alias="base")
    expended_by: str
    expend_date: datetime
    items: list[LineItemResponse]
    assignment_id: int | None = Field(default=None, alias="assignment")
    assignment_status: AssignmentStatus | None = None
    remarks: str | None = None
    created_by: str
    created_at: datetime

    @classmethod
    def from_entity(
        cls,
        expenditure: Expenditure,
        assignment_status: AssignmentStatus | None = None,
    ) -> "ExpenditureResponse":
        return cls(
            id=expenditure.id,
            base_id=expenditure.base_id,
            expended_by=expenditure.expended_by,
            expend_date=expenditure.expend_date,
            items=[
                LineItemResponse(asset_id=i.asset_id, quantity=i.quantity)
                for i in expenditure.items
            ],
            assignment_id=expenditure.assignment_id,
            assignment_status=assignment_status,
            remarks=expenditure.remarks,
            created_by=expenditure.created_by,
            created_at=expenditure.created_at,
        )


class PageMeta(CamelModel):
    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 0


class PurchaseListResponse(PageMeta):
    purchases: list[PurchaseResponse] = Field(default_factory=list)


class TransferListResponse(PageMeta):
    transfers: list[TransferResponse] = Field(default_factory=list)


class AssignmentListResponse(PageMeta):
    assignments: list[AssignmentResponse] = Field(default_factory=list)


class ExpenditureListResponse(PageMeta):
    expenditures: list[ExpenditureResponse] = Field(default_factory=list)


# --- Stock, movement, summary ---


class StockResponse(CamelModel):
    """One (base, asset) inventory row."""

    base_id: int = Field(..., alias="base")
    asset_id: int = Field(..., alias="asset")
    asset_name: str | None = None
    category: AssetCategory | None = None
    quantity: int
    purchased: int
    assigned: int
    expended: int
    transferred_in: int
    transferred_out: int
    available: int
    is_low_stock: bool = False

    @classmethod
    def from_entity(
        cls,
        stock: InventoryStock,
        asset: Asset | None = None,
        low_stock_threshold: int | None = None,
    ) -> "StockResponse":
        return cls(
            base_id=stock.base_id,
            asset_id=stock.asset_id,
            asset_name=asset.name if asset else None,
            category=asset.category if asset else None,
            quantity=stock.quantity,
            purchased=stock.purchased,
            assigned=stock.assigned,
            expended=stock.expended,
            transferred_in=stock.transferred_in,
            transferred_out=stock.transferred_out,
            available=stock.available,
            is_low_stock=(
                low_stock_threshold is not None and stock.quantity <= low_stock_threshold
            ),
        )


class StockListResponse(CamelModel):
    stocks: list[StockResponse] = Field(default_factory=list)
    base: BaseResponse | None = None


class MovementLogResponse(CamelModel):
    source_id: int | None = None
    date: datetime
    action_type: str
    base_id: int = Field(..., alias="base")
    to_base_id: int | None = Field(default=None, alias="toBase")
    items: list[LineItemResponse]
    total_quantity: int
    performed_by: str
    remarks: str | None = None
    reference: str | None = None

    @classmethod
    def from_entity(cls, entry: MovementLogEntry) -> "MovementLogResponse":
        return cls(
            source_id=entry.source_id,
            date=entry.date,
            action_type=entry.action_type.value,
            base_id=entry.base_id,
            to_base_id=entry.to_base_id,
            items=[LineItemResponse(asset_id=i.asset_id, quantity=i.quantity) for i in entry.items],
            total_quantity=entry.total_quantity,
            performed_by=entry.performed_by,
            remarks=entry.remarks,
            reference=entry.reference,
        )


class MovementListResponse(PageMeta):
    logs: list[MovementLogResponse] = Field(default_factory=list)


class AssetSummaryResponse(CamelModel):
    asset_id: int = Field(..., alias="asset")
    asset_name: str | None = None
    category: AssetCategory | None = None
    opening_balance: int
    closing_balance: int
    purchases: int
    transfers_in: int
    transfers_out: int
    assigned: int
    expended: int
    net_movements: int

    @classmethod
    def from_entity(cls, summary: AssetSummary, asset: Asset | None = None) -> "AssetSummaryResponse":
        return cls(
            asset_id=summary.asset_id,
            asset_name=asset.name if asset else None,
            category=asset.category if asset else None,
            **summary.model_dump(exclude={"asset_id"}),
        )


class DashboardTotalsResponse(CamelModel):
    total_opening_balance: int = 0
    total_closing_balance: int = 0
    total_net_movements: int = 0
    total_purchases: int = 0
    total_transfers_in: int = 0
    total_transfers_out: int = 0
    total_assigned: int = 0
    total_expended: int = 0

    @classmethod
    def from_entity(cls, totals: DashboardTotals) -> "DashboardTotalsResponse":
        return cls(**totals.model_dump())


class SummaryResponse(CamelModel):
    summaries: list[AssetSummaryResponse] = Field(default_factory=list)
    totals: DashboardTotalsResponse = Field(default_factory=DashboardTotalsResponse)
    base: BaseResponse | None = None


# --- Service ---


class HealthResponse(CamelModel):
    status: str = Field(..., description="ok or degraded")
    version: str
    database: bool


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ASSIGNMENT_NOT_FOUND)
    - message: human-readable description, shown to users verbatim
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
