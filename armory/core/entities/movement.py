"""Movement log entities."""

from datetime import datetime

from pydantic import BaseModel, Field

from armory.core.entities.transaction import LineItem, TransactionKind

ActionType = TransactionKind


class MovementLogEntry(BaseModel):
    """Read-only projection of one transaction of any kind."""

    source_id: int | None = None
    date: datetime
    action_type: ActionType
    base_id: int
    to_base_id: int | None = None  # transfers only
    items: list[LineItem] = Field(min_length=1)
    performed_by: str
    remarks: str | None = None
    reference: str | None = None  # invoice number or assignee

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def touches_base(self, base_id: int) -> bool:
        return self.base_id == base_id or self.to_base_id == base_id
