"""Inventory ledger entities.

Stock levels are never stored: they are derived by replaying transactions.
"""

from pydantic import BaseModel


class InventoryStock(BaseModel):
    """Per (base, asset) snapshot.

    ``assigned`` is the quantity currently checked out. The other counters
    are lifetime totals, except ``quantity`` which rises and falls.
    """

    base_id: int
    asset_id: int
    quantity: int = 0
    purchased: int = 0
    assigned: int = 0
    expended: int = 0
    transferred_in: int = 0
    transferred_out: int = 0

    @property
    def available(self) -> int:
        """On-hand stock not checked out to anyone."""
        return self.quantity - self.assigned

    def is_balanced(self) -> bool:
        return self.quantity == (
            self.purchased + self.transferred_in - self.transferred_out - self.expended
        )


class AssetSummary(BaseModel):
    """Windowed ledger for one asset at one base."""

    asset_id: int
    opening_balance: int = 0
    closing_balance: int = 0
    purchases: int = 0
    transfers_in: int = 0
    transfers_out: int = 0
    assigned: int = 0
    expended: int = 0
    net_movements: int = 0


class DashboardTotals(BaseModel):
    """Fold of asset summaries over a base or the whole fleet."""

    total_opening_balance: int = 0
    total_closing_balance: int = 0
    total_net_movements: int = 0
    total_purchases: int = 0
    total_transfers_in: int = 0
    total_transfers_out: int = 0
    total_assigned: int = 0
    total_expended: int = 0
