"""SQLite counter-table identifier generator."""

from stockroom.config import get_logger
from stockroom.core.interfaces.id_generator import IIdGenerator
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


class SQLiteIdGenerator(IIdGenerator):
    """Allocates `<PREFIX>-<n>` identifiers from a per-kind counter row.

    The increment and the read happen in one write transaction, so two
    callers can never observe the same counter value.
    """

    def __init__(self, pool: ConnectionPool, padding: int = 6):
        self._pool = pool
        self._padding = padding

    async def generate(self, kind: str, prefix: str) -> str:
        value = await self.next_value(kind)
        identifier = f"{prefix}-{value:0{self._padding}d}"
        logger.debug("identifier_allocated", kind=kind, identifier=identifier)
        return identifier

    async def next_value(self, kind: str) -> int:
        """Increment and return the counter for `kind` (first value is 1)."""
        async with self._pool.transaction() as conn:
            await conn.execute(
                "INSERT OR IGNORE INTO id_sequences (kind, current_value) VALUES (?, 0)",
                (kind,),
            )
            await conn.execute(
                "UPDATE id_sequences SET current_value = current_value + 1 WHERE kind = ?",
                (kind,),
            )
            cursor = await conn.execute(
                "SELECT current_value FROM id_sequences WHERE kind = ?", (kind,)
            )
            row = await cursor.fetchone()
            return int(row["current_value"])

    async def current_value(self, kind: str) -> int | None:
        """Read the counter without incrementing it."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT current_value FROM id_sequences WHERE kind = ?", (kind,)
            )
            row = await cursor.fetchone()
            return None if row is None else int(row["current_value"])
