"""Transport protocol and shared base class."""

import json
from abc import ABC, abstractmethod
from typing import ClassVar, Protocol

from ..context import SinkContext
from ..models import TraceRecord


class ITransport(Protocol):
    """A pluggable sink: relays a record, then persists it."""

    id: ClassVar[str]

    async def start(self) -> None:
        """Acquire sink resources."""
        ...

    async def stop(self) -> None:
        """Release sink resources."""
        ...

    async def relay(self, record: TraceRecord) -> None:
        """Echo the record to the sink's live output."""
        ...

    async def persist(self, record: TraceRecord) -> None:
        """Durably store the record."""
        ...


class Transport(ABC):
    """Base sink with no-op lifecycle and debug-level relay; subclasses define persist."""

    id: ClassVar[str] = ""
    name: ClassVar[str] = ""

    def __init__(self, context: SinkContext):
        self._context = context
        self._logger = context.logger.getChild(self.id)

    async def start(self) -> None:
        return

    async def stop(self) -> None:
        return

    async def relay(self, record: TraceRecord) -> None:
        self._logger.debug("Trace %s from %s", record.id, record.host)

    @abstractmethod
    async def persist(self, record: TraceRecord) -> None:
        ...

    @staticmethod
    def format(record: TraceRecord) -> str:
        return json.dumps(record.to_document(), ensure_ascii=False)
