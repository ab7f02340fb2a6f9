"""Reference data entities: assets and bases."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class AssetCategory(str, Enum):
    """Fixed asset categories, authoritative for filtering."""

    WEAPON = "weapon"
    VEHICLE = "vehicle"
    AMMUNITION = "ammunition"
    EQUIPMENT = "equipment"


class Asset(BaseModel):
    """A trackable category of equipment (not a serialized unit)."""

    id: int | None = None
    name: str
    category: AssetCategory
    unit: str = "unit"  # unit of measure
    description: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Base(BaseModel):
    """A physical installation holding its own inventory."""

    id: int | None = None
    name: str
    district: str
    state: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def label(self) -> str:
        return f"{self.name} - {self.district}, {self.state}"
