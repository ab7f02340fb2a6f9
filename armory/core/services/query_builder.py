"""
Filter state to canonical query.

``FilterState`` holds the predicates a screen exposes. ``build_query`` is a
pure function of that state: the same state always produces the same
mapping, and ``to_query_string`` the same bytes.
"""

from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from enum import Enum
from urllib.parse import urlencode

from armory.core.exceptions import InvalidDateRangeError, ValidationError

ALL_SENTINELS = frozenset({"All statuses", "All types", "All categories", "All bases"})

# Attribute name to wire key
WIRE_KEYS = {
    "page": "page",
    "limit": "limit",
    "search": "search",
    "base_id": "baseId",
    "asset_id": "assetId",
    "category": "category",
    "action_type": "actionType",
    "status": "status",
    "performed_by": "performedBy",
    "assigned_to": "assignedTo",
    "expended_by": "expendedBy",
    "as_of": "date",
    "date_from": "dateFrom",
    "date_to": "dateTo",
    "min_quantity": "minQuantity",
    "max_quantity": "maxQuantity",
    "show_low_stock": "showLowStock",
    "sort_field": "sortField",
    "sort_direction": "sortDirection",
}

# Keys each screen sends
SCREEN_PRESETS: dict[str, frozenset[str]] = {
    "stock": frozenset(
        {
            "search",
            "base_id",
            "asset_id",
            "category",
            "date_from",
            "date_to",
            "min_quantity",
            "max_quantity",
            "show_low_stock",
            "sort_field",
            "sort_direction",
        }
    ),
    "movement": frozenset(
        {
            "page",
            "limit",
            "search",
            "base_id",
            "asset_id",
            "action_type",
            "performed_by",
            "date_from",
            "date_to",
            "sort_field",
            "sort_direction",
        }
    ),
    "summary": frozenset({"base_id", "category", "as_of", "date_from", "date_to"}),
    "assignments": frozenset(
        {
            "page",
            "limit",
            "base_id",
            "asset_id",
            "status",
            "assigned_to",
            "date_from",
            "date_to",
            "sort_field",
            "sort_direction",
        }
    ),
    "expenditures": frozenset(
        {
            "page",
            "limit",
            "search",
            "base_id",
            "asset_id",
            "expended_by",
            "as_of",
            "date_from",
            "date_to",
        }
    ),
    "purchases": frozenset({"page", "limit", "base_id", "asset_id", "as_of", "date_from", "date_to"}),
    "transfers": frozenset({"page", "limit", "base_id", "asset_id", "as_of", "date_from", "date_to"}),
}


@dataclass(frozen=True)
class FilterState:
    """
    Immutable UI filter predicates.

    Mutators return a new state. Any change other than to ``page`` sends the
    state back to page 1.
    """

    page: int = 1
    limit: int | None = None
    search: str | None = None
    base_id: int | str | None = None
    asset_id: int | None = None
    category: str | None = None
    action_type: str | None = None
    status: str | None = None
    performed_by: str | None = None
    assigned_to: str | None = None
    expended_by: str | None = None
    as_of: date | None = None
    date_from: date | None = None
    date_to: date | None = None
    min_quantity: int | None = None
    max_quantity: int | None = None
    show_low_stock: bool = False
    sort_field: str | None = None
    sort_direction: str | None = None

    def update(self, **changes) -> "FilterState":
        """Apply predicate changes; resets to page 1 unless only ``page`` changed."""
        unknown = set(changes) - set(WIRE_KEYS)
        if unknown:
            raise ValidationError("filters", f"unknown filter keys: {sorted(unknown)}")
        if "date_from" in changes or "date_to" in changes:
            raise ValidationError("filters", "use set_date_from / set_date_to for date bounds")
        if set(changes) - {"page"}:
            changes.setdefault("page", 1)
        return replace(self, **changes)

    def set_page(self, page: int) -> "FilterState":
        if page < 1:
            raise ValidationError("page", "page must be at least 1", page)
        return replace(self, page=page)

    def set_date_from(self, value: date | None) -> "FilterState":
        """Set the lower bound; clears ``date_to`` if it would be inverted."""
        value = _as_date(value)
        date_to = self.date_to
        if value is not None and date_to is not None and value > date_to:
            date_to = None
        return replace(self, date_from=value, date_to=date_to, page=1)

    def set_date_to(self, value: date | None) -> "FilterState":
        """Set the upper bound; clears ``date_from`` if it would be inverted."""
        value = _as_date(value)
        date_from = self.date_from
        if value is not None and date_from is not None and value < date_from:
            date_from = None
        return replace(self, date_from=date_from, date_to=value, page=1)

    def sort(self, field_name: str) -> "FilterState":
        """Toggle direction on the current sort field, else sort ascending."""
        if self.sort_field == field_name:
            direction = "desc" if self.sort_direction == "asc" else "asc"
        else:
            direction = "asc"
        return replace(self, sort_field=field_name, sort_direction=direction, page=1)

    def clear(self) -> "FilterState":
        """Drop every predicate, keeping page size and sort."""
        return FilterState(
            limit=self.limit,
            sort_field=self.sort_field,
            sort_direction=self.sort_direction,
        )

    def active_count(self) -> int:
        """Number of predicates that would reach the wire, ignoring paging and sort."""
        ignored = {"page", "limit", "sort_field", "sort_direction"}
        return sum(
            1
            for item in fields(self)
            if item.name not in ignored and _serialize(getattr(self, item.name)) is not None
        )


def _as_date(value: date | datetime | None) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    return value


def _serialize(value) -> str | None:
    """Wire form of a value, or ``None`` when the key must be omitted."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else None
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not text or text in ALL_SENTINELS:
        return None
    return text


def build_query(state: FilterState, screen: str | None = None) -> dict[str, str]:
    """
    Canonical query mapping for a filter state.

    Args:
        state: Current filter state
        screen: Optional preset name restricting which keys are sent

    Raises:
        InvalidDateRangeError: both bounds set and inverted
    """
    if state.date_from and state.date_to and state.date_from > state.date_to:
        raise InvalidDateRangeError(state.date_from, state.date_to)

    allowed = SCREEN_PRESETS.get(screen) if screen else None
    if screen and allowed is None:
        raise ValidationError("screen", f"unknown screen preset: {screen}", screen)

    query: dict[str, str] = {}
    for item in fields(state):
        if allowed is not None and item.name not in allowed:
            continue
        serialized = _serialize(getattr(state, item.name))
        if serialized is not None:
            query[WIRE_KEYS[item.name]] = serialized
    return dict(sorted(query.items()))


def to_query_string(state: FilterState, screen: str | None = None) -> str:
    """Byte-stable query string for a filter state."""
    return urlencode(build_query(state, screen))
