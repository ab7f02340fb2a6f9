"""
Async SQLite connection pool for the ledger database.

Connections run in autocommit mode. Writers open ``BEGIN IMMEDIATE``
through ``transaction()`` so a stock check and the insert that depends on
it share one write lock.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from armory.config import get_logger, get_settings
from armory.core.exceptions import DatabaseError

logger = get_logger(__name__)

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """
    Fixed number of aiosqlite connections handed out through a queue.

    Opened lazily on first ``acquire()`` if ``initialize()`` was not called.
    """

    def __init__(self, db_path: Path, pool_size: int = 5, busy_timeout: int = 30000):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._connections: list[aiosqlite.Connection] = []
        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._open_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return bool(self._connections)

    async def initialize(self) -> None:
        async with self._open_lock:
            if self.is_open:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            opened = [await self._connect() for _ in range(self.pool_size)]
            for conn in opened:
                self._idle.put_nowait(conn)
            self._connections = opened
        logger.info("ledger_pool_opened", db_path=str(self.db_path), size=self.pool_size)

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)
        for pragma in (*_PRAGMAS, f"PRAGMA busy_timeout={self.busy_timeout}"):
            await conn.execute(pragma)
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self, operation: str = "read") -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection; it goes back to the queue on exit.

        ``OperationalError`` raised inside the block (a lock held past
        ``busy_timeout``, a full disk) surfaces as ``DatabaseError``.
        """
        if not self.is_open:
            await self.initialize()
        conn = await self._idle.get()
        try:
            yield conn
        except aiosqlite.OperationalError as e:
            logger.error("ledger_database_error", operation=operation, error=str(e))
            raise DatabaseError(operation, str(e)) from e
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection inside ``BEGIN IMMEDIATE``; commit or roll back on exit."""
        async with self.acquire("write") as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.execute("ROLLBACK")
                raise
            await conn.execute("COMMIT")

    async def ping(self) -> bool:
        async with self.acquire() as conn:
            cursor = await conn.execute("SELECT 1")
            return await cursor.fetchone() is not None

    async def close(self) -> None:
        async with self._open_lock:
            connections, self._connections = self._connections, []
            self._idle = asyncio.Queue()
            for conn in connections:
                await conn.close()
        if connections:
            logger.info("ledger_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool built from ``settings.storage``."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(storage.db_path, storage.pool_size, storage.busy_timeout)
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    pool, _pool = _pool, None
    if pool is not None:
        await pool.close()


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    async with (await get_pool()).acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    async with (await get_pool()).transaction() as conn:
        yield conn
