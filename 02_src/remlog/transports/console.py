"""Console transport: echoes traces to the operational log."""

from ..models import TraceRecord
from .base import Transport

_LEVELS = {
    "debug": "debug",
    "log": "info",
    "info": "info",
    "success": "info",
    "warn": "warning",
    "error": "error",
}


class ConsoleTransport(Transport):
    """Default development sink. Nothing reaches the lock file."""

    id = "console"
    name = "ConsoleTransport"

    async def relay(self, record: TraceRecord) -> None:
        log = getattr(self._logger, _LEVELS.get(record.level or "info", "info"))
        log(
            "[%s] %s %s",
            record.host,
            record.id,
            record.message or self.format(record),
            extra={"context": record.to_document()},
        )

    async def persist(self, record: TraceRecord) -> None:
        self._logger.debug("Trace %s is not persisted by the console transport", record.id)
