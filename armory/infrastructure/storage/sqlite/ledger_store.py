"""SQLite implementation of the transaction ledger."""

from datetime import datetime

import aiosqlite

from armory.config import get_logger
from armory.core.entities.transaction import (
    Assignment,
    AssignmentItem,
    Expenditure,
    LedgerTransaction,
    LineItem,
    Purchase,
    TransactionKind,
    Transfer,
)
from armory.core.exceptions import (
    InvalidStateTransitionError,
    PurchaseNotFoundError,
    ValidationError,
)
from armory.core.interfaces.ledger_store import ILedgerStore, StockGuard
from armory.core.services.inventory_ledger import ledger_order
from armory.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

_TABLES = {
    TransactionKind.PURCHASE: "purchases",
    TransactionKind.TRANSFER: "transfers",
    TransactionKind.ASSIGNMENT: "assignments",
    TransactionKind.EXPENDITURE: "expenditures",
}

_BASE_FILTERS = {
    TransactionKind.PURCHASE: ("base_id = ?", 1),
    TransactionKind.TRANSFER: ("(from_base_id = ? OR to_base_id = ?)", 2),
    TransactionKind.ASSIGNMENT: ("base_id = ?", 1),
    TransactionKind.EXPENDITURE: ("base_id = ?", 1),
}


class SQLiteLedgerStore(ILedgerStore):
    """
    SQLite ledger of purchases, transfers, assignments and expenditures.

    All line items live in one ``line_items`` table keyed by
    ``(txn_kind, txn_id, position)``.
    """

    # Purchases

    async def create_purchase(self, purchase: Purchase) -> Purchase:
        async with get_transaction() as conn:
            cursor = await self._execute(
                conn,
                """
                INSERT INTO purchases (
                    base_id, purchase_date, invoice_number, remarks, created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    purchase.base_id,
                    purchase.purchase_date.isoformat(),
                    purchase.invoice_number,
                    purchase.remarks,
                    purchase.created_by,
                    purchase.created_at.isoformat(),
                ),
            )
            purchase.id = cursor.lastrowid
            await self._insert_items(conn, purchase.kind, purchase.id, purchase.items)

        logger.info(
            "purchase_recorded",
            purchase_id=purchase.id,
            base_id=purchase.base_id,
            items=len(purchase.items),
            quantity=purchase.total_quantity,
        )
        return purchase

    async def update_purchase(
        self,
        purchase: Purchase,
        guard: StockGuard | None = None,
    ) -> Purchase:
        """
        Replace a purchase in place.

        ``guard`` receives the whole ledger with this purchase already
        substituted, so it can check that no base goes negative.
        """
        async with get_transaction() as conn:
            cursor = await self._execute(
                conn,
                """
                UPDATE purchases SET base_id = ?, purchase_date = ?, invoice_number = ?,
                    remarks = ?
                WHERE id = ?
                """,
                (
                    purchase.base_id,
                    purchase.purchase_date.isoformat(),
                    purchase.invoice_number,
                    purchase.remarks,
                    purchase.id,
                ),
            )
            if cursor.rowcount == 0:
                raise PurchaseNotFoundError(purchase.id)

            await conn.execute(
                "DELETE FROM line_items WHERE txn_kind = ? AND txn_id = ?",
                (purchase.kind.value, purchase.id),
            )
            await self._insert_items(conn, purchase.kind, purchase.id, purchase.items)

            if guard is not None:
                guard(await self._fetch(conn))

            updated = await self._get(conn, TransactionKind.PURCHASE, purchase.id)

        logger.info("purchase_updated", purchase_id=purchase.id, items=len(purchase.items))
        return updated

    async def get_purchase(self, purchase_id: int) -> Purchase | None:
        async with get_connection() as conn:
            return await self._get(conn, TransactionKind.PURCHASE, purchase_id)

    # Transfers

    async def create_transfer(
        self,
        transfer: Transfer,
        guard: StockGuard | None = None,
    ) -> Transfer:
        async with get_transaction() as conn:
            if guard is not None:
                guard(await self._fetch(conn, base_id=transfer.from_base_id))

            cursor = await self._execute(
                conn,
                """
                INSERT INTO transfers (
                    from_base_id, to_base_id, transfer_date, invoice_number, remarks,
                    created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transfer.from_base_id,
                    transfer.to_base_id,
                    transfer.transfer_date.isoformat(),
                    transfer.invoice_number,
                    transfer.remarks,
                    transfer.created_by,
                    transfer.created_at.isoformat(),
                ),
            )
            transfer.id = cursor.lastrowid
            await self._insert_items(conn, transfer.kind, transfer.id, transfer.items)

        logger.info(
            "transfer_recorded",
            transfer_id=transfer.id,
            from_base_id=transfer.from_base_id,
            to_base_id=transfer.to_base_id,
            quantity=transfer.total_quantity,
        )
        return transfer

    async def get_transfer(self, transfer_id: int) -> Transfer | None:
        async with get_connection() as conn:
            return await self._get(conn, TransactionKind.TRANSFER, transfer_id)

    # Assignments

    async def create_assignment(
        self,
        assignment: Assignment,
        guard: StockGuard | None = None,
    ) -> Assignment:
        async with get_transaction() as conn:
            if guard is not None:
                guard(await self._fetch(conn, base_id=assignment.base_id))

            cursor = await self._execute(
                conn,
                """
                INSERT INTO assignments (
                    base_id, assigned_to, assign_date, is_expended, remarks,
                    created_by, created_at
                ) VALUES (?, ?, ?, 0, ?, ?, ?)
                """,
                (
                    assignment.base_id,
                    assignment.assigned_to,
                    assignment.assign_date.isoformat(),
                    assignment.remarks,
                    assignment.created_by,
                    assignment.created_at.isoformat(),
                ),
            )
            assignment_id = cursor.lastrowid
            await self._insert_items(conn, assignment.kind, assignment_id, assignment.items)
            created = await self._get(conn, TransactionKind.ASSIGNMENT, assignment_id)

        logger.info(
            "assignment_created",
            assignment_id=assignment_id,
            base_id=assignment.base_id,
            assigned_to=assignment.assigned_to,
            quantity=assignment.total_quantity,
        )
        return created

    async def get_assignment(self, assignment_id: int) -> Assignment | None:
        async with get_connection() as conn:
            return await self._get(conn, TransactionKind.ASSIGNMENT, assignment_id)

    # Expenditures

    async def create_expenditure(
        self,
        expenditure: Expenditure,
        guard: StockGuard | None = None,
    ) -> Expenditure:
        async with get_transaction() as conn:
            if guard is not None:
                guard(await self._fetch(conn, base_id=expenditure.base_id))
            await self._insert_expenditure(conn, expenditure)

        logger.info(
            "expenditure_recorded",
            expenditure_id=expenditure.id,
            base_id=expenditure.base_id,
            quantity=expenditure.total_quantity,
        )
        return expenditure

    async def get_expenditure(self, expenditure_id: int) -> Expenditure | None:
        async with get_connection() as conn:
            return await self._get(conn, TransactionKind.EXPENDITURE, expenditure_id)

    async def expend_assignment_items(
        self,
        assignment_id: int,
        item_ids: list[int],
        expenditure: Expenditure,
    ) -> Expenditure:
        placeholders = ", ".join("?" for _ in item_ids)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"""
                UPDATE line_items SET is_expended = 1
                WHERE txn_kind = 'assignment' AND txn_id = ? AND is_expended = 0
                    AND id IN ({placeholders})
                """,
                (assignment_id, *item_ids),
            )
            if cursor.rowcount != len(item_ids):
                # Another session flipped at least one item first; roll back
                raise InvalidStateTransitionError(
                    assignment_id, "items were expended by another request"
                )

            await self._insert_expenditure(conn, expenditure)
            await conn.execute(
                """
                UPDATE assignments SET is_expended = (
                    SELECT MIN(is_expended) FROM line_items
                    WHERE txn_kind = 'assignment' AND txn_id = assignments.id
                )
                WHERE id = ?
                """,
                (assignment_id,),
            )

        logger.info(
            "assignment_items_expended",
            assignment_id=assignment_id,
            item_ids=item_ids,
            expenditure_id=expenditure.id,
        )
        return expenditure

    # Queries

    async def list_transactions(
        self,
        kinds: set[TransactionKind] | None = None,
        base_id: int | None = None,
    ) -> list[LedgerTransaction]:
        async with get_connection() as conn:
            return await self._fetch(conn, kinds=kinds, base_id=base_id)

    # Internals

    @staticmethod
    async def _execute(
        conn: aiosqlite.Connection,
        sql: str,
        params: tuple,
    ) -> aiosqlite.Cursor:
        try:
            return await conn.execute(sql, params)
        except aiosqlite.IntegrityError as e:
            raise ValidationError("base", "unknown base or invalid transaction", str(e)) from e

    async def _insert_expenditure(
        self,
        conn: aiosqlite.Connection,
        expenditure: Expenditure,
    ) -> None:
        cursor = await self._execute(
            conn,
            """
            INSERT INTO expenditures (
                base_id, expended_by, expend_date, assignment_id, remarks,
                created_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                expenditure.base_id,
                expenditure.expended_by,
                expenditure.expend_date.isoformat(),
                expenditure.assignment_id,
                expenditure.remarks,
                expenditure.created_by,
                expenditure.created_at.isoformat(),
            ),
        )
        expenditure.id = cursor.lastrowid
        await self._insert_items(conn, expenditure.kind, expenditure.id, expenditure.items)

    @staticmethod
    async def _insert_items(
        conn: aiosqlite.Connection,
        kind: TransactionKind,
        txn_id: int,
        items: list[LineItem],
    ) -> None:
        try:
            await conn.executemany(
                """
                INSERT INTO line_items (txn_kind, txn_id, position, asset_id, quantity, is_expended)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        kind.value,
                        txn_id,
                        position,
                        item.asset_id,
                        item.quantity,
                        int(getattr(item, "is_expended", False)),
                    )
                    for position, item in enumerate(items)
                ],
            )
        except aiosqlite.IntegrityError as e:
            raise ValidationError("items", "unknown asset on line item", str(e)) from e

    async def _get(
        self,
        conn: aiosqlite.Connection,
        kind: TransactionKind,
        txn_id: int,
    ) -> LedgerTransaction | None:
        cursor = await conn.execute(f"SELECT * FROM {_TABLES[kind]} WHERE id = ?", (txn_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        items = await self._load_items(conn, kind, [txn_id])
        return self._row_to_transaction(kind, row, items.get(txn_id, []))

    async def _fetch(
        self,
        conn: aiosqlite.Connection,
        kinds: set[TransactionKind] | None = None,
        base_id: int | None = None,
    ) -> list[LedgerTransaction]:
        transactions: list[LedgerTransaction] = []
        for kind in _TABLES:
            if kinds is not None and kind not in kinds:
                continue
            sql = f"SELECT * FROM {_TABLES[kind]}"
            params: tuple = ()
            if base_id is not None:
                clause, count = _BASE_FILTERS[kind]
                sql += f" WHERE {clause}"
                params = (base_id,) * count
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            if not rows:
                continue
            items = await self._load_items(conn, kind, [row["id"] for row in rows])
            transactions.extend(
                self._row_to_transaction(kind, row, items.get(row["id"], [])) for row in rows
            )
        return sorted(transactions, key=ledger_order)

    @staticmethod
    async def _load_items(
        conn: aiosqlite.Connection,
        kind: TransactionKind,
        txn_ids: list[int],
    ) -> dict[int, list[aiosqlite.Row]]:
        placeholders = ", ".join("?" for _ in txn_ids)
        cursor = await conn.execute(
            f"""
            SELECT * FROM line_items
            WHERE txn_kind = ? AND txn_id IN ({placeholders})
            ORDER BY txn_id, position
            """,
            (kind.value, *txn_ids),
        )
        grouped: dict[int, list[aiosqlite.Row]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["txn_id"], []).append(row)
        return grouped

    @staticmethod
    def _row_to_transaction(
        kind: TransactionKind,
        row: aiosqlite.Row,
        item_rows: list[aiosqlite.Row],
    ) -> LedgerTransaction:
        common = {
            "id": row["id"],
            "remarks": row["remarks"],
            "created_by": row["created_by"],
            "created_at": datetime.fromisoformat(row["created_at"]),
        }
        if kind is TransactionKind.ASSIGNMENT:
            return Assignment(
                base_id=row["base_id"],
                assigned_to=row["assigned_to"],
                assign_date=datetime.fromisoformat(row["assign_date"]),
                items=[
                    AssignmentItem(
                        id=item["id"],
                        asset_id=item["asset_id"],
                        quantity=item["quantity"],
                        is_expended=bool(item["is_expended"]),
                    )
                    for item in item_rows
                ],
                **common,
            )

        items = [LineItem(asset_id=item["asset_id"], quantity=item["quantity"]) for item in item_rows]
        if kind is TransactionKind.PURCHASE:
            return Purchase(
                base_id=row["base_id"],
                purchase_date=datetime.fromisoformat(row["purchase_date"]),
                invoice_number=row["invoice_number"],
                items=items,
                **common,
            )
        if kind is TransactionKind.TRANSFER:
            return Transfer(
                from_base_id=row["from_base_id"],
                to_base_id=row["to_base_id"],
                transfer_date=datetime.fromisoformat(row["transfer_date"]),
                invoice_number=row["invoice_number"],
                items=items,
                **common,
            )
        return Expenditure(
            base_id=row["base_id"],
            expended_by=row["expended_by"],
            expend_date=datetime.fromisoformat(row["expend_date"]),
            assignment_id=row["assignment_id"],
            items=items,
            **common,
        )
