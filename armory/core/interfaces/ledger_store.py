"""Abstract interface for ledger transaction storage."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from armory.core.entities.transaction import (
    Assignment,
    Expenditure,
    LedgerTransaction,
    Purchase,
    TransactionKind,
    Transfer,
)

# Called with the base's transactions inside the write transaction; raises to abort
StockGuard = Callable[[list[LedgerTransaction]], None]


class ILedgerStore(ABC):
    """
    Interface for the append-mostly transaction ledger.

    Stock is never stored; callers replay ``list_transactions``. Writes that
    draw stock take a ``guard`` which sees the ledger under the same write
    lock as the insert, so two concurrent draws cannot both pass the check.
    """

    @abstractmethod
    async def create_purchase(self, purchase: Purchase) -> Purchase:
        """Record a purchase with its line items."""
        pass

    @abstractmethod
    async def update_purchase(
        self,
        purchase: Purchase,
        guard: StockGuard | None = None,
    ) -> Purchase:
        """Replace a purchase's fields and line items."""
        pass

    @abstractmethod
    async def get_purchase(self, purchase_id: int) -> Purchase | None:
        pass

    @abstractmethod
    async def create_transfer(
        self,
        transfer: Transfer,
        guard: StockGuard | None = None,
    ) -> Transfer:
        pass

    @abstractmethod
    async def get_transfer(self, transfer_id: int) -> Transfer | None:
        pass

    @abstractmethod
    async def create_assignment(
        self,
        assignment: Assignment,
        guard: StockGuard | None = None,
    ) -> Assignment:
        """Record an assignment; line items come back with their ids."""
        pass

    @abstractmethod
    async def get_assignment(self, assignment_id: int) -> Assignment | None:
        pass

    @abstractmethod
    async def create_expenditure(
        self,
        expenditure: Expenditure,
        guard: StockGuard | None = None,
    ) -> Expenditure:
        """Record a direct expenditure (no assignment)."""
        pass

    @abstractmethod
    async def get_expenditure(self, expenditure_id: int) -> Expenditure | None:
        pass

    @abstractmethod
    async def expend_assignment_items(
        self,
        assignment_id: int,
        item_ids: list[int],
        expenditure: Expenditure,
    ) -> Expenditure:
        """
        Flip the given line items to expended and record the expenditure.

        Atomic: the flags are set only where still unexpended. If any item
        was already flipped by another session, nothing is written and
        InvalidStateTransitionError is raised.
        """
        pass

    @abstractmethod
    async def list_transactions(
        self,
        kinds: set[TransactionKind] | None = None,
        base_id: int | None = None,
    ) -> list[LedgerTransaction]:
        """
        List transactions, oldest first.

        Args:
            kinds: Restrict to these kinds
            base_id: Restrict to transactions touching this base
                (either side of a transfer)
        """
        pass
