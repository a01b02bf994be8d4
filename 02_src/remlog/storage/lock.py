"""Lock file storage: the durable trace store behind read-back queries.

Consistency contract: ``save`` returns once the record is accepted into the
bounded write queue, not once it is on disk. A single writer task applies
queued records in order and atomically replaces the lock file after each
one, so readers see either the previous snapshot or the new one, never a
partial file. Concurrent saves for the same id race; the last one applied
wins.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from ..errors import NotFoundError, StoreUnavailableError
from ..logging_config import get_logger
from ..models import TraceRecord

logger = get_logger(__name__)


class ITraceStore(Protocol):
    """Single-writer key-value store of TraceRecords keyed by id."""

    async def start(self) -> None:
        """Start the writer task."""
        ...

    async def stop(self) -> None:
        """Drain pending writes and stop the writer task."""
        ...

    async def save(self, record: TraceRecord) -> None:
        """Queue a record for insertion or overwrite."""
        ...

    async def flush(self) -> None:
        """Wait until every queued record has been applied."""
        ...

    async def load_all(self, strict: bool = False) -> list[TraceRecord]:
        """All records in insertion order."""
        ...

    async def load_by_id(self, trace_id: str) -> TraceRecord:
        """A single record by id."""
        ...


def _write_atomic(path: Path, entries: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(entries, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def _read_entries(path: Path) -> list[dict[str, Any]]:
    """Read the raw lock file. Raises FileNotFoundError, OSError or ValueError."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list) or not all(isinstance(entry, dict) for entry in data):
        raise ValueError("lock file does not contain a list of trace objects")
    return data


class TraceStore:
    """JSON lock file store fed by a bounded queue and one writer task."""

    def __init__(
        self,
        path: str | Path,
        queue_size: int = 1024,
        put_timeout: float = 5.0,
    ):
        self._path = Path(path)
        self._queue_size = queue_size
        self._put_timeout = put_timeout
        self._queue: asyncio.Queue[TraceRecord] | None = None
        self._writer: asyncio.Task | None = None
        # Authoritative view owned by the writer task, loaded on first write
        self._entries: dict[str, dict[str, Any]] | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def running(self) -> bool:
        return self._writer is not None and not self._writer.done()

    async def start(self) -> None:
        """Start the writer task."""
        if self.running:
            return

        self._queue = asyncio.Queue(maxsize=self._queue_size)
        self._writer = asyncio.create_task(self._drain(), name="remlog-lock-writer")
        logger.info("Trace store writer started for %s", self._path)

    async def stop(self) -> None:
        """Drain pending writes and stop the writer task."""
        if not self._writer:
            return

        if self.running:
            await self.flush()

        self._writer.cancel()
        try:
            await self._writer
        except asyncio.CancelledError:
            pass
        self._writer = None
        self._queue = None
        logger.info("Trace store writer stopped")

    async def save(self, record: TraceRecord) -> None:
        """Queue a record; blocks up to put_timeout seconds when the queue is full."""
        if not self._queue or not self.running:
            raise RuntimeError("Trace store not started")

        try:
            await asyncio.wait_for(self._queue.put(record), timeout=self._put_timeout)
        except asyncio.TimeoutError:
            raise StoreUnavailableError(
                f"Trace store write queue is full, dropped trace {record.id}"
            ) from None

    async def flush(self) -> None:
        """Wait until every queued record has been applied."""
        if self._queue:
            await self._queue.join()

    async def _drain(self) -> None:
        queue = self._queue
        while True:
            record = await queue.get()
            try:
                await asyncio.to_thread(self._apply, record)
            except Exception:
                logger.exception("Failed to persist trace %s to %s", record.id, self._path)
            finally:
                queue.task_done()

    def _apply(self, record: TraceRecord) -> None:
        if self._entries is None:
            self._entries = self._load_for_writer()

        self._entries[record.id] = record.to_document()
        _write_atomic(self._path, list(self._entries.values()))

    def _load_for_writer(self) -> dict[str, dict[str, Any]]:
        try:
            entries = _read_entries(self._path)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.error("Lock file %s is unreadable, starting a new one: %s", self._path, e)
            return {}

        return {str(entry.get("id")): entry for entry in entries}

    async def _read(self) -> list[TraceRecord]:
        entries = await asyncio.to_thread(_read_entries, self._path)
        try:
            return [TraceRecord.model_validate(entry) for entry in entries]
        except ValueError as e:
            raise ValueError(f"lock file holds an invalid trace: {e}") from e

    async def load_all(self, strict: bool = False) -> list[TraceRecord]:
        """All records in insertion order; missing file is an empty store.

        An unreadable or corrupt file also reads as empty unless ``strict``
        is set, in which case it raises StoreUnavailableError.
        """
        try:
            return await self._read()
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            if strict:
                raise StoreUnavailableError(f"Trace store {self._path} is unavailable: {e}") from e
            logger.warning("Reading %s failed, listing no traces: %s", self._path, e)
            return []

    async def load_by_id(self, trace_id: str) -> TraceRecord:
        """A single record; NotFoundError if absent, StoreUnavailableError if unreadable."""
        try:
            records = await self._read()
        except (OSError, ValueError) as e:
            raise StoreUnavailableError(
                f"Logfile with ID {trace_id} is unavailable, trace store {self._path} "
                f"cannot be read: {e}"
            ) from e

        for record in records:
            if record.id == trace_id:
                return record
        raise NotFoundError(trace_id)
