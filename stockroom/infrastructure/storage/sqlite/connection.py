"""
SQLite connection pool for the inventory database.

The application opens one pool at startup, hands it to every store and id
generator, and closes it at shutdown. Nothing opens connections lazily:
using a pool that is not open raises StorageError.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from stockroom.config import Settings, get_logger
from stockroom.core.exceptions import StorageError

logger = get_logger(__name__)

CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """Fixed number of aiosqlite connections shared through a queue."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._connections: list[aiosqlite.Connection] = []
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionPool":
        storage = settings.storage
        return cls(storage.db_path, storage.pool_size, storage.busy_timeout)

    @property
    def initialized(self) -> bool:
        return bool(self._connections)

    async def initialize(self) -> None:
        """Open every connection; a second call on an open pool does nothing."""
        async with self._lock:
            if self._connections:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await self._connect()
                self._connections.append(conn)
                self._idle.put_nowait(conn)

        logger.info(
            "connection_pool_initialized",
            db_path=str(self.db_path),
            pool_size=self.pool_size,
        )

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        for pragma in CONNECTION_PRAGMAS:
            await conn.execute(pragma)
        await conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout)}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection until the block exits.

        Raises:
            StorageError: If the pool has not been opened or was closed.
        """
        if not self._connections:
            raise StorageError(
                f"Connection pool for {self.db_path} is not open",
                code="POOL_CLOSED",
            )
        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection inside a write transaction.

        Takes the write lock up front with BEGIN IMMEDIATE. Commits on
        success, rolls back on any exception.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def close(self) -> None:
        """Close all connections. The pool can be initialized again afterwards."""
        async with self._lock:
            connections, self._connections = self._connections, []
            self._idle = asyncio.Queue()
            for conn in connections:
                await conn.close()
        logger.info("connection_pool_closed", db_path=str(self.db_path))


@asynccontextmanager
async def open_pool(settings: Settings) -> AsyncIterator[ConnectionPool]:
    """Open a pool for the lifetime of the block (scripts and CLI commands)."""
    pool = ConnectionPool.from_settings(settings)
    await pool.initialize()
    try:
        yield pool
    finally:
        await pool.close()
