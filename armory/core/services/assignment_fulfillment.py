"""
Assignment fulfillment state machine.

Layer-pure service: depends only on core entities and exceptions.

An assignment moves Active -> PartiallyExpended -> Expended, or straight
from Active to Expended. The state is computed from the line item flags;
a flag, once set, never clears. Fulfillment is per line item: an item is
expended for its whole assigned quantity or not at all.
"""

from dataclasses import dataclass
from datetime import datetime

from armory.core.entities.transaction import (
    Assignment,
    AssignmentItem,
    AssignmentStatus,
    Expenditure,
    LineItem,
    as_naive_utc,
)
from armory.core.exceptions import InvalidStateTransitionError, ValidationError

ALLOWED_TRANSITIONS: dict[AssignmentStatus, frozenset[AssignmentStatus]] = {
    AssignmentStatus.ACTIVE: frozenset(
        {AssignmentStatus.PARTIALLY_EXPENDED, AssignmentStatus.EXPENDED}
    ),
    AssignmentStatus.PARTIALLY_EXPENDED: frozenset(
        {AssignmentStatus.PARTIALLY_EXPENDED, AssignmentStatus.EXPENDED}
    ),
    AssignmentStatus.EXPENDED: frozenset(),
}


@dataclass(frozen=True)
class ItemRef:
    """Reference to one assignment line item.

    Either ``item_id`` names the line item directly, or ``asset_id`` (with an
    optional ``quantity``) picks the first unexpended line item of that asset.
    """

    item_id: int | None = None
    asset_id: int | None = None
    quantity: int | None = None


@dataclass
class ExpenditureDetails:
    """Who consumed the items, when, and why."""

    expended_by: str
    expend_date: datetime
    remarks: str | None = None
    created_by: str = "system"

    def __post_init__(self) -> None:
        self.expend_date = as_naive_utc(self.expend_date)


@dataclass
class FulfillmentResult:
    """Outcome of marking items expended."""

    assignment: Assignment
    expenditure: Expenditure
    expended_items: list[AssignmentItem]
    previous_status: AssignmentStatus

    @property
    def status(self) -> AssignmentStatus:
        return self.assignment.status


def check_transition(
    assignment_id: int | None,
    current: AssignmentStatus,
    target: AssignmentStatus,
) -> None:
    """Raise unless ``current -> target`` is a legal move."""
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStateTransitionError(
            assignment_id, f"cannot move from {current.value} to {target.value}"
        )


class AssignmentFulfillment:
    """Applies expenditure selections to assignments."""

    def resolve_selection(
        self,
        assignment: Assignment,
        refs: list[ItemRef],
    ) -> list[int]:
        """
        Map item references to positions in ``assignment.items``.

        Raises:
            InvalidStateTransitionError: assignment fully expended, or a
                referenced item already expended
            ValidationError: empty selection, foreign item, duplicate
                reference, or quantity other than the assigned quantity
        """
        if assignment.status is AssignmentStatus.EXPENDED:
            raise InvalidStateTransitionError(
                assignment.id, "assignment is already fully expended"
            )
        if not refs:
            raise ValidationError("items", "select at least one item to expend")

        chosen: list[int] = []
        for ref in refs:
            index = self._resolve_one(assignment, ref, chosen)
            if index in chosen:
                raise ValidationError("items", "the same line item was selected twice", ref)
            chosen.append(index)
        return chosen

    def _resolve_one(
        self,
        assignment: Assignment,
        ref: ItemRef,
        chosen: list[int],
    ) -> int:
        if ref.item_id is not None:
            for index, item in enumerate(assignment.items):
                if item.id == ref.item_id:
                    self._check_item(assignment, item, ref)
                    return index
            raise ValidationError(
                "items",
                f"item {ref.item_id} does not belong to assignment {assignment.id}",
                ref.item_id,
            )

        if ref.asset_id is None:
            raise ValidationError("items", "each item needs an item id or an asset", ref)

        same_asset = [
            (index, item)
            for index, item in enumerate(assignment.items)
            if item.asset_id == ref.asset_id
        ]
        if not same_asset:
            raise ValidationError(
                "items",
                f"asset {ref.asset_id} is not on assignment {assignment.id}",
                ref.asset_id,
            )

        open_items = [
            (index, item)
            for index, item in same_asset
            if not item.is_expended and index not in chosen
        ]
        if not open_items:
            raise InvalidStateTransitionError(
                assignment.id, f"asset {ref.asset_id} is already expended"
            )

        if ref.quantity is not None:
            for index, item in open_items:
                if item.quantity == ref.quantity:
                    return index

        index, item = open_items[0]
        self._check_item(assignment, item, ref)
        return index

    @staticmethod
    def _check_item(assignment: Assignment, item: AssignmentItem, ref: ItemRef) -> None:
        if item.is_expended:
            raise InvalidStateTransitionError(
                assignment.id, f"item {item.id} is already expended"
            )
        if ref.quantity is None or ref.quantity == item.quantity:
            return
        if ref.quantity > item.quantity:
            message = f"quantity {ref.quantity} exceeds the assigned {item.quantity}"
        else:
            message = (
                f"quantity {ref.quantity} must cover the full assigned {item.quantity}; "
                "partial expenditure of a line item is not supported"
            )
        raise ValidationError("quantity", message, ref.quantity)

    def mark_items_expended(
        self,
        assignment: Assignment,
        refs: list[ItemRef],
        details: ExpenditureDetails,
    ) -> FulfillmentResult:
        """
        Expend the selected line items of an assignment.

        Returns the updated assignment (a copy) and the new, unsaved
        expenditure linked to it. The input assignment is not modified.
        """
        previous = assignment.status
        positions = self.resolve_selection(assignment, refs)

        if details.expend_date.date() < assignment.assign_date.date():
            raise ValidationError(
                "expendDate",
                "expenditure cannot be dated before the assignment",
                details.expend_date.isoformat(),
            )

        items = [
            item.model_copy(update={"is_expended": True}) if index in positions else item
            for index, item in enumerate(assignment.items)
        ]
        updated = assignment.model_copy(update={"items": items})
        check_transition(assignment.id, previous, updated.status)

        expended = [items[index] for index in sorted(positions)]
        expenditure = Expenditure(
            base_id=assignment.base_id,
            expended_by=details.expended_by,
            expend_date=details.expend_date,
            remarks=details.remarks,
            created_by=details.created_by,
            assignment_id=assignment.id,
            items=[LineItem(asset_id=item.asset_id, quantity=item.quantity) for item in expended],
        )
        return FulfillmentResult(
            assignment=updated,
            expenditure=expenditure,
            expended_items=expended,
            previous_status=previous,
        )
