"""SQLite implementation of asset and base storage."""

from datetime import datetime

import aiosqlite

from armory.config import get_logger
from armory.core.entities.reference import Asset, AssetCategory, Base
from armory.core.exceptions import (
    AssetNotFoundError,
    BaseNotFoundError,
    ReferenceInUseError,
    ValidationError,
)
from armory.core.interfaces.reference_store import IReferenceStore
from armory.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteReferenceStore(IReferenceStore):
    """SQLite implementation of reference data storage."""

    # Asset operations

    async def list_assets(self) -> list[Asset]:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM assets ORDER BY name COLLATE NOCASE")
            rows = await cursor.fetchall()
            return [self._row_to_asset(row) for row in rows]

    async def get_asset(self, asset_id: int) -> Asset | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM assets WHERE id = ?", (asset_id,))
            row = await cursor.fetchone()
            return self._row_to_asset(row) if row else None

    async def create_asset(self, asset: Asset) -> Asset:
        now = datetime.utcnow()
        asset.created_at = now
        asset.updated_at = now
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO assets (name, category, unit, description, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        asset.name,
                        asset.category.value,
                        asset.unit,
                        asset.description,
                        now.isoformat(),
                        now.isoformat(),
                    ),
                )
                asset.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise ValidationError("name", "an asset with this name already exists", asset.name) from e

        logger.info("asset_created", asset_id=asset.id, name=asset.name)
        return asset

    async def update_asset(self, asset: Asset) -> Asset:
        asset.updated_at = datetime.utcnow()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE assets SET name = ?, category = ?, unit = ?, description = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        asset.name,
                        asset.category.value,
                        asset.unit,
                        asset.description,
                        asset.updated_at.isoformat(),
                        asset.id,
                    ),
                )
                if cursor.rowcount == 0:
                    raise AssetNotFoundError(asset.id)
        except aiosqlite.IntegrityError as e:
            raise ValidationError("name", "an asset with this name already exists", asset.name) from e

        logger.info("asset_updated", asset_id=asset.id)
        return asset

    async def delete_asset(self, asset_id: int) -> bool:
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute("DELETE FROM assets WHERE id = ?", (asset_id,))
                deleted = cursor.rowcount > 0
        except aiosqlite.IntegrityError as e:
            raise ReferenceInUseError("asset", asset_id) from e

        if deleted:
            logger.info("asset_deleted", asset_id=asset_id)
        return deleted

    # Base operations

    async def list_bases(self) -> list[Base]:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM bases ORDER BY name COLLATE NOCASE")
            rows = await cursor.fetchall()
            return [self._row_to_base(row) for row in rows]

    async def get_base(self, base_id: int) -> Base | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM bases WHERE id = ?", (base_id,))
            row = await cursor.fetchone()
            return self._row_to_base(row) if row else None

    async def create_base(self, base: Base) -> Base:
        now = datetime.utcnow()
        base.created_at = now
        base.updated_at = now
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO bases (name, district, state, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (base.name, base.district, base.state, now.isoformat(), now.isoformat()),
                )
                base.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise ValidationError("name", "a base with this name already exists", base.name) from e

        logger.info("base_created", base_id=base.id, name=base.name)
        return base

    async def update_base(self, base: Base) -> Base:
        base.updated_at = datetime.utcnow()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE bases SET name = ?, district = ?, state = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (base.name, base.district, base.state, base.updated_at.isoformat(), base.id),
                )
                if cursor.rowcount == 0:
                    raise BaseNotFoundError(base.id)
        except aiosqlite.IntegrityError as e:
            raise ValidationError("name", "a base with this name already exists", base.name) from e

        logger.info("base_updated", base_id=base.id)
        return base

    async def delete_base(self, base_id: int) -> bool:
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute("DELETE FROM bases WHERE id = ?", (base_id,))
                deleted = cursor.rowcount > 0
        except aiosqlite.IntegrityError as e:
            raise ReferenceInUseError("base", base_id) from e

        if deleted:
            logger.info("base_deleted", base_id=base_id)
        return deleted

    @staticmethod
    def _row_to_asset(row: aiosqlite.Row) -> Asset:
        return Asset(
            id=row["id"],
            name=row["name"],
            category=AssetCategory(row["category"]),
            unit=row["unit"],
            description=row["description"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_base(row: aiosqlite.Row) -> Base:
        return Base(
            id=row["id"],
            name=row["name"],
            district=row["district"],
            state=row["state"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
