"""Ledger transaction entities.

Four kinds of transaction move assets: purchases, transfers, assignments
and expenditures. Each carries an ordered list of line items, one per asset.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, Field, computed_field


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# Ledger timestamps are naive UTC so replay ordering never mixes aware and naive
UtcDateTime = Annotated[datetime, AfterValidator(as_naive_utc)]


class TransactionKind(str, Enum):
    """Transaction kinds, also used as movement log action types."""

    PURCHASE = "purchase"
    TRANSFER = "transfer"
    ASSIGNMENT = "assignment"
    EXPENDITURE = "expenditure"


class AssignmentStatus(str, Enum):
    """Lifecycle of an assignment, derived from its item flags."""

    ACTIVE = "Active"
    PARTIALLY_EXPENDED = "PartiallyExpended"
    EXPENDED = "Expended"


class LineItem(BaseModel):
    """Quantity of one asset on a transaction."""

    asset_id: int
    quantity: int = Field(gt=0)


class AssignmentItem(LineItem):
    """Assignment line item; flips to expended exactly once."""

    id: int | None = None
    is_expended: bool = False


class Transaction(BaseModel):
    """Fields shared by every ledger transaction."""

    kind: ClassVar[TransactionKind]

    id: int | None = None
    items: list[LineItem]
    remarks: str | None = None
    created_by: str = "system"
    created_at: UtcDateTime = Field(default_factory=datetime.utcnow)

    @property
    def occurred_at(self) -> datetime:
        """Business date of the transaction (not the insert time)."""
        raise NotImplementedError

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def asset_ids(self) -> list[int]:
        return [item.asset_id for item in self.items]

    def quantities(self) -> dict[int, int]:
        """Quantity per asset, summing repeated assets."""
        totals: dict[int, int] = {}
        for item in self.items:
            totals[item.asset_id] = totals.get(item.asset_id, 0) + item.quantity
        return totals


class Purchase(Transaction):
    """Strictly additive receipt of assets at a base."""

    kind: ClassVar[TransactionKind] = TransactionKind.PURCHASE

    base_id: int
    purchase_date: UtcDateTime
    invoice_number: str

    @property
    def occurred_at(self) -> datetime:
        return self.purchase_date


class Transfer(Transaction):
    """Movement of assets from one base to another."""

    kind: ClassVar[TransactionKind] = TransactionKind.TRANSFER

    from_base_id: int
    to_base_id: int
    transfer_date: UtcDateTime
    invoice_number: str

    @property
    def occurred_at(self) -> datetime:
        return self.transfer_date


class Assignment(Transaction):
    """Checkout of asset quantities to a person, pending consumption."""

    kind: ClassVar[TransactionKind] = TransactionKind.ASSIGNMENT

    base_id: int
    assigned_to: str
    assign_date: UtcDateTime
    items: list[AssignmentItem]

    @property
    def occurred_at(self) -> datetime:
        return self.assign_date

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_expended(self) -> bool:
        """True iff every line item is expended."""
        return bool(self.items) and all(item.is_expended for item in self.items)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> AssignmentStatus:
        expended = sum(1 for item in self.items if item.is_expended)
        if expended == 0:
            return AssignmentStatus.ACTIVE
        if expended == len(self.items):
            return AssignmentStatus.EXPENDED
        return AssignmentStatus.PARTIALLY_EXPENDED


class Expenditure(Transaction):
    """Consumption event that removes quantity from accountable stock."""

    kind: ClassVar[TransactionKind] = TransactionKind.EXPENDITURE

    base_id: int
    expended_by: str
    expend_date: UtcDateTime
    assignment_id: int | None = None  # set when fulfilling an assignment

    @property
    def occurred_at(self) -> datetime:
        return self.expend_date


LedgerTransaction = Purchase | Transfer | Assignment | Expenditure
