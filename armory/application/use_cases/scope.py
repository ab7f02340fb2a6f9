"""Base scoping for the calling actor."""

from datetime import datetime

from armory.core.entities.access import Actor, Operation
from armory.core.entities.transaction import LedgerTransaction, Transfer
from armory.core.exceptions import PermissionDeniedError, ValidationError


def require(actor: Actor, operation: Operation) -> None:
    """Raise PermissionDeniedError unless the actor's role allows ``operation``."""
    if not actor.can(operation):
        raise PermissionDeniedError(actor.role.value, operation.value)


def resolve_base(actor: Actor, requested: int | None, *, required: bool = True) -> int | None:
    """
    Base the actor is acting on.

    Admins may name any base, or none (all bases) when ``required`` is
    False. Every other role is pinned to its own base and may not name
    another one.
    """
    if actor.can(Operation.VIEW_ALL_BASES):
        base_id = requested if requested is not None else actor.base_id
        if base_id is None and required:
            raise ValidationError("base", "a base is required for this operation")
        return base_id

    if actor.base_id is None:
        raise PermissionDeniedError(actor.role.value, "act without an assigned base")
    if requested is not None and requested != actor.base_id:
        raise PermissionDeniedError(actor.role.value, f"act on base {requested}")
    return actor.base_id


def can_see(actor: Actor, txn: LedgerTransaction) -> bool:
    if actor.can(Operation.VIEW_ALL_BASES):
        return True
    if isinstance(txn, Transfer):
        return actor.base_id in (txn.from_base_id, txn.to_base_id)
    return txn.base_id == actor.base_id


def business_date(value: datetime | None) -> datetime:
    """Default a missing business date to now (naive UTC)."""
    return value if value is not None else datetime.utcnow()
