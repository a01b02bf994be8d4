"""Read-only queries against the trace store."""

import json
from typing import Protocol

from ..models import TraceRecord
from ..storage import ITraceStore


class ILogReader(Protocol):
    """Read-back of accumulated traces."""

    async def list_logs(self) -> list[TraceRecord]:
        """All traces; an absent or broken store lists as empty."""
        ...

    async def list_logs_json(self) -> str:
        """All traces as a JSON array document."""
        ...

    async def get_log(self, trace_id: str) -> TraceRecord:
        """A single trace by id."""
        ...


class LogReader:
    """Queries the lock store without ever writing to it."""

    def __init__(self, store: ITraceStore):
        self._store = store

    async def list_logs(self) -> list[TraceRecord]:
        return await self._store.load_all()

    async def list_logs_json(self) -> str:
        records = await self._store.load_all(strict=True)
        return json.dumps([record.to_document() for record in records], ensure_ascii=False)

    async def get_log(self, trace_id: str) -> TraceRecord:
        return await self._store.load_by_id(trace_id)
