"""
Ledger schema migrator.

Migration files live next to this module as ``vNNN_name.sql`` and run in
version order. Each applied file is recorded in ``schema_migrations`` with
a short content hash, so an edited file shows up as a checksum warning
instead of running twice. An existing database file is copied aside
before a run and put back if the run blows up.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from armory.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(?P<version>\d+)_(?P<name>.+)\.sql")

REQUIRED_TABLES = (
    "assets",
    "bases",
    "purchases",
    "transfers",
    "assignments",
    "expenditures",
    "line_items",
    "schema_migrations",
)


@dataclass(frozen=True)
class MigrationInfo:
    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if match is None:
            raise ValueError(f"Migration file must look like v001_name.sql, got {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(match["version"], match["name"], path, digest[:16])

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files under ``directory``, oldest version first."""
    found = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("migration_file_ignored", path=str(path), error=str(e))
    return found


async def _applied(conn: aiosqlite.Connection) -> dict[str, str]:
    """version -> checksum for every recorded migration; empty on a new file."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        await conn.executescript(migration.read())
        await conn.execute(
            "INSERT OR REPLACE INTO schema_migrations "
            "(version, name, checksum, execution_time_ms) VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("schema_migration_failed", version=migration.version, error=str(e))
        return MigrationResult(migration.version, migration.name, False, elapsed_ms(), str(e))

    logger.info(
        "schema_migration_applied",
        version=migration.version,
        name=migration.name,
        ms=elapsed_ms(),
    )
    return MigrationResult(migration.version, migration.name, True, elapsed_ms())


def create_backup(db_path: Path) -> Path:
    """Copy ``ledger.db`` to ``ledger.backup_<timestamp>.db`` beside it."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("ledger_backup_written", path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("ledger_backup_restored", path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Apply every pending migration.

    Stops at the first failing file. The backup is removed once all
    pending files have applied cleanly.

    Returns:
        One result per migration attempted in this call
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = create_backup(db_path)

    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")
            applied = await _applied(conn)

            for migration in discover_migrations():
                recorded = applied.get(migration.version)
                if recorded is not None:
                    if recorded != migration.checksum:
                        logger.warning("schema_migration_edited", version=migration.version)
                    continue
                result = await _apply(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except Exception:
        logger.exception("ledger_migration_aborted", db_path=str(db_path))
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None and all(r.success for r in results):
        backup_path.unlink()

    logger.info("ledger_schema_ready", db_path=str(db_path), applied=len(results))
    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Current version plus applied and pending migration versions."""
    db_path = db_path or get_settings().storage.db_path
    available = [m.version for m in discover_migrations()]

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": available,
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = sorted(await _applied(conn))

    return {
        "exists": True,
        "current_version": applied[-1] if applied else None,
        "applied_migrations": applied,
        "pending_migrations": [v for v in available if v not in applied],
        "total_migrations": len(available),
    }


# Each check: (name, query, key for the offending rows)
_ROW_CHECKS = (
    ("foreign_keys", "PRAGMA foreign_key_check", "violations"),
    (
        # assignments.is_expended must be the AND of its line item flags
        "assignment_flags",
        """
        SELECT a.id FROM assignments a
        JOIN line_items li ON li.txn_kind = 'assignment' AND li.txn_id = a.id
        GROUP BY a.id
        HAVING a.is_expended <> MIN(li.is_expended)
        """,
        "assignments",
    ),
    (
        # line_items.txn_id has no foreign key; it points into one of four tables
        "orphan_line_items",
        """
        SELECT li.id FROM line_items li
        LEFT JOIN purchases p ON li.txn_kind = 'purchase' AND p.id = li.txn_id
        LEFT JOIN transfers t ON li.txn_kind = 'transfer' AND t.id = li.txn_id
        LEFT JOIN assignments a ON li.txn_kind = 'assignment' AND a.id = li.txn_id
        LEFT JOIN expenditures e ON li.txn_kind = 'expenditure' AND e.id = li.txn_id
        WHERE COALESCE(p.id, t.id, a.id, e.id) IS NULL
        """,
        "line_items",
    ),
)


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Run the ledger consistency checks; each entry has ``check`` and ``status``."""
    db_path = db_path or get_settings().storage.db_path
    checks: list[dict] = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        (verdict,) = await cursor.fetchone()
        checks.append(
            {"check": "integrity", "status": "PASS" if verdict == "ok" else "FAIL", "result": verdict}
        )

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {name for (name,) in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in tables]
        checks.append(
            {"check": "required_tables", "status": "FAIL" if missing else "PASS", "missing": missing}
        )

        for name, query, key in _ROW_CHECKS:
            cursor = await conn.execute(query)
            offending = [row[0] for row in await cursor.fetchall()]
            checks.append({"check": name, "status": "FAIL" if offending else "PASS", key: offending})

    return checks


def main() -> None:
    """``armory-migrate``: apply, inspect or verify the ledger schema."""
    import argparse

    parser = argparse.ArgumentParser(description="Armory ledger schema migrations")
    parser.add_argument("--db-path", type=Path, help="Database file (default from settings)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--status", action="store_true", help="Show applied and pending versions")
    mode.add_argument("--verify", action="store_true", help="Run consistency checks")
    parser.add_argument("--no-backup", action="store_true", help="Skip the pre-run backup")
    args = parser.parse_args()

    if args.status:
        status = asyncio.run(get_migration_status(args.db_path))
        for key, value in status.items():
            print(f"{key:>20}: {value}")
    elif args.verify:
        for check in asyncio.run(verify_schema_integrity(args.db_path)):
            extra = {k: v for k, v in check.items() if k not in ("check", "status")}
            print(f"[{check['status']}] {check['check']} {extra if check['status'] != 'PASS' else ''}")
    else:
        results = asyncio.run(
            initialize_database(args.db_path, create_backup_before=not args.no_backup)
        )
        if not results:
            print("Schema is up to date")
        for r in results:
            outcome = "ok" if r.success else f"FAILED: {r.error}"
            print(f"v{r.version} {r.name} ({r.execution_time_ms}ms) {outcome}")


if __name__ == "__main__":
    main()
