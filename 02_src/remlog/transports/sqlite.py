"""SQLite transport: archives traces in a database next to the lock file."""

from pathlib import Path

import aiosqlite

from ..context import SinkContext
from ..models import TraceRecord
from .base import Transport


class SqliteTransport(Transport):
    """Keeps a queryable SQLite archive and still feeds the lock file."""

    id = "sqlite"
    name = "SqliteTransport"

    def __init__(self, context: SinkContext):
        super().__init__(context)
        self._db_path = context.config.sqlite_path
        self._conn: aiosqlite.Connection | None = None

    async def start(self) -> None:
        """Open the database and create the traces table."""
        if self._conn:
            return

        Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()
        self._logger.info("SQLite archive opened at %s", self._db_path)

    async def stop(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def persist(self, record: TraceRecord) -> None:
        if not self._conn:
            raise RuntimeError("SQLite transport not started")

        await self._conn.execute(
            """
            INSERT OR REPLACE INTO traces (id, host, timestamp, level, document)
            VALUES (?, ?, ?, ?, ?)
            """,
            (record.id, record.host, record.timestamp, record.level, self.format(record)),
        )
        await self._conn.commit()
        await self._context.store.save(record)

    async def count(self) -> int:
        """Number of archived traces."""
        if not self._conn:
            raise RuntimeError("SQLite transport not started")

        async with self._conn.execute("SELECT COUNT(*) FROM traces") as cursor:
            row = await cursor.fetchone()
        return row[0]
