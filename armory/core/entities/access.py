"""Roles and the allowed-action matrix."""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    BASE_COMMANDER = "base_commander"
    LOGISTICS_OFFICER = "logistics_officer"
    USER = "user"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class Operation(str, Enum):
    VIEW_DASHBOARD = "view_dashboard"
    VIEW_STOCK = "view_stock"
    VIEW_MOVEMENTS = "view_movements"
    RECORD_PURCHASE = "record_purchase"
    UPDATE_PURCHASE = "update_purchase"
    RECORD_TRANSFER = "record_transfer"
    CREATE_ASSIGNMENT = "create_assignment"
    EXPEND_ASSIGNMENT = "expend_assignment"
    RECORD_EXPENDITURE = "record_expenditure"
    MANAGE_REFERENCE_DATA = "manage_reference_data"
    VIEW_ALL_BASES = "view_all_bases"


_READ = frozenset({Operation.VIEW_DASHBOARD, Operation.VIEW_STOCK, Operation.VIEW_MOVEMENTS})

PERMISSIONS: dict[Role, frozenset[Operation]] = {
    Role.ADMIN: frozenset(Operation),
    Role.BASE_COMMANDER: _READ
    | {
        Operation.CREATE_ASSIGNMENT,
        Operation.EXPEND_ASSIGNMENT,
        Operation.RECORD_EXPENDITURE,
    },
    Role.LOGISTICS_OFFICER: _READ
    | {
        Operation.RECORD_PURCHASE,
        Operation.UPDATE_PURCHASE,
        Operation.RECORD_TRANSFER,
    },
    Role.USER: frozenset({Operation.VIEW_STOCK}),
}


def is_allowed(role: Role, operation: Operation) -> bool:
    return operation in PERMISSIONS.get(role, frozenset())


class Actor(BaseModel):
    """The authenticated caller, as asserted by the auth gateway."""

    name: str = "system"
    role: Role = Role.USER
    base_id: int | None = None

    def can(self, operation: Operation) -> bool:
        return is_allowed(self.role, operation)
