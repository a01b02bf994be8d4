"""Generic transport: persists traces to the lock file."""

from ..models import TraceRecord
from .base import Transport


class GenericTransport(Transport):
    """Writes every trace to the store backing /logs.json."""

    id = "generic"
    name = "GenericTransport"

    async def persist(self, record: TraceRecord) -> None:
        await self._context.store.save(record)
