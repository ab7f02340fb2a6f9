"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases. Wire names are
camelCase; Python code uses the snake_case field names.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from armory.core.entities.reference import AssetCategory
from armory.core.entities.transaction import AssignmentStatus, TransactionKind


class CamelModel(BaseModel):
    """Base for wire models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Reference data ---


class AssetRequest(CamelModel):
    """Create or update an asset."""

    name: str = Field(..., min_length=1, max_length=200, description="Asset name")
    category: AssetCategory = Field(..., description="Asset category")
    unit: str = Field(default="unit", description="Unit of measure")
    description: str | None = Field(default=None, description="Free-text description")


class BaseRequest(CamelModel):
    """Create or update a base."""

    name: str = Field(..., min_length=1, max_length=200, description="Base name")
    district: str = Field(..., min_length=1, description="District")
    state: str = Field(..., min_length=1, description="State")


# --- Ledger transactions ---


class LineItemRequest(CamelModel):
    """One asset and quantity on a transaction."""

    asset_id: int = Field(..., alias="asset", description="Asset ID")
    quantity: int = Field(..., gt=0, description="Whole units, positive")


class CreatePurchaseRequest(CamelModel):
    """Record a purchase. ``base`` defaults to the caller's own base."""

    base_id: int | None = Field(default=None, alias="base", description="Receiving base ID")
    purchase_date: datetime | None = Field(default=None, description="Defaults to now")
    invoice_number: str = Field(..., min_length=1, description="Supplier invoice number")
    items: list[LineItemRequest] = Field(..., min_length=1)
    remarks: str | None = None


class UpdatePurchaseRequest(CreatePurchaseRequest):
    """Replace a purchase's fields and line items."""

    pass


class CreateTransferRequest(CamelModel):
    """Move assets from one base to another."""

    from_base_id: int | None = Field(default=None, alias="fromBase", description="Source base")
    to_base_id: int = Field(..., alias="toBase", description="Destination base")
    transfer_date: datetime | None = Field(default=None, description="Defaults to now")
    invoice_number: str = Field(..., min_length=1, description="Transfer document number")
    items: list[LineItemRequest] = Field(..., min_length=1)
    remarks: str | None = None


class CreateAssignmentRequest(CamelModel):
    """Check assets out to a person."""

    base_id: int | None = Field(default=None, alias="base")
    assigned_to: str = Field(..., min_length=1, description="Person receiving the assets")
    assign_date: datetime | None = Field(default=None, description="Defaults to now")
    items: list[LineItemRequest] = Field(..., min_length=1)
    remarks: str | None = None


class CreateExpenditureRequest(CamelModel):
    """Record consumption of stock not tied to an assignment."""

    base_id: int | None = Field(default=None, alias="base")
    expended_by: str = Field(..., min_length=1)
    expend_date: datetime | None = Field(default=None, description="Defaults to now")
    items: list[LineItemRequest] = Field(..., min_length=1)
    remarks: str | None = None


class ExpendItemRequest(CamelModel):
    """Reference to an assignment line item, by id or by asset and quantity."""

    item_id: int | None = Field(default=None, alias="itemId")
    asset_id: int | None = Field(default=None, alias="asset")
    quantity: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def require_reference(self) -> "ExpendItemRequest":
        if self.item_id is None and self.asset_id is None:
            raise ValueError("each item needs itemId or asset")
        return self


class MarkExpendedRequest(CamelModel):
    """Expend selected line items of an assignment."""

    expended_by: str = Field(..., min_length=1)
    items: list[ExpendItemRequest] = Field(..., min_length=1)
    remarks: str | None = None
    expend_date: datetime | None = Field(default=None, description="Defaults to now")
    base_id: int | None = Field(
        default=None,
        alias="base",
        description="Must match the assignment's base when given",
    )


# --- Queries ---


class StockQuery(CamelModel):
    """Filters for ``GET /api/stocks/my``."""

    base_id: int | None = None
    asset_id: int | None = None
    category: AssetCategory | None = None
    search: str | None = Field(default=None, description="Matches asset name")
    date_from: date | None = None
    date_to: date | None = Field(default=None, description="Replay up to this day")
    min_quantity: int | None = None
    max_quantity: int | None = None
    show_low_stock: bool = False
    sort_field: str | None = None
    sort_direction: Literal["asc", "desc"] = "asc"


class MovementQuery(CamelModel):
    """Filters for ``GET /api/movement``."""

    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1)
    base_id: int | None = None
    asset_id: int | None = None
    action_type: TransactionKind | None = None
    performed_by: str | None = None
    search: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    sort_field: str = "date"
    sort_direction: Literal["asc", "desc"] = "desc"


class SummaryQuery(CamelModel):
    """Filters for ``GET /api/summary``."""

    base_id: int | None = None
    category: AssetCategory | None = None
    as_of: date | None = Field(default=None, alias="date", description="One-day window")
    date_from: date | None = None
    date_to: date | None = None


class TransactionListQuery(CamelModel):
    """Filters for the per-kind ``getMy`` lists."""

    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1)
    base_id: int | None = None
    asset_id: int | None = None
    as_of: date | None = Field(default=None, alias="date")
    date_from: date | None = None
    date_to: date | None = None
    status: AssignmentStatus | None = None
    assigned_to: str | None = None
    expended_by: str | None = None
    search: str | None = None
    sort_direction: Literal["asc", "desc"] = "desc"
