"""Abstract interface for asset and base reference data."""

from abc import ABC, abstractmethod

from armory.core.entities.reference import Asset, Base


class IReferenceStore(ABC):
    """Interface for asset and base persistence."""

    # Asset operations
    @abstractmethod
    async def list_assets(self) -> list[Asset]:
        """List all assets ordered by name."""
        pass

    @abstractmethod
    async def get_asset(self, asset_id: int) -> Asset | None:
        """Get asset by ID."""
        pass

    @abstractmethod
    async def create_asset(self, asset: Asset) -> Asset:
        """Create a new asset."""
        pass

    @abstractmethod
    async def update_asset(self, asset: Asset) -> Asset:
        """Update an existing asset."""
        pass

    @abstractmethod
    async def delete_asset(self, asset_id: int) -> bool:
        """Delete an asset. Raises ReferenceInUseError if ledger rows use it."""
        pass

    # Base operations
    @abstractmethod
    async def list_bases(self) -> list[Base]:
        """List all bases ordered by name."""
        pass

    @abstractmethod
    async def get_base(self, base_id: int) -> Base | None:
        """Get base by ID."""
        pass

    @abstractmethod
    async def create_base(self, base: Base) -> Base:
        """Create a new base."""
        pass

    @abstractmethod
    async def update_base(self, base: Base) -> Base:
        """Update an existing base."""
        pass

    @abstractmethod
    async def delete_base(self, base_id: int) -> bool:
        """Delete a base. Raises ReferenceInUseError if ledger rows use it."""
        pass
