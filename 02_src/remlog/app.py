"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import ServerConfig
from .context import SinkContext
from .logging_config import get_logger
from .normalizer import Normalizer
from .reader import ILogReader, LogReader
from .storage import ITraceStore, TraceStore
from .tracker import ITracer, Tracer
from .transports import Transport, create_transport

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    config: ServerConfig

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def tracer(self) -> ITracer:
        ...

    @property
    def reader(self) -> ILogReader:
        ...


class Application:
    """Main application bootstrap.

    The transport is resolved here rather than in ``start`` so an unknown
    sink id fails at construction, before the server binds its port.
    """

    def __init__(self, config: ServerConfig | None = None):
        self.config = config or ServerConfig.from_env()

        # 1. Store (no dependencies)
        self._store = TraceStore(
            self.config.lock_file,
            queue_size=self.config.queue_size,
            put_timeout=self.config.queue_timeout,
        )

        # 2. Transport (depends on Store through the sink context)
        logger.info("Attaching transport %s ...", self.config.transport)
        context = SinkContext(
            store=self._store,
            logger=get_logger("remlog.transport"),
            config=self.config,
        )
        self._transport = create_transport(self.config.transport, context)
        logger.info("Setting CORS restriction to %s ...", ", ".join(self.config.cors))

        # 3. Tracer and reader
        self._tracer = Tracer(Normalizer(), self._transport, get_logger("remlog.tracer"))
        self._reader = LogReader(self._store)
        self._started = False

    async def start(self) -> None:
        """Initialize components in dependency order."""
        if self._started:
            return

        logger.info("Starting application")
        await self._store.start()
        await self._transport.start()
        self._started = True
        logger.info("Transport %s ready", self._transport.name)

    async def stop(self) -> None:
        """Shutdown in reverse order; pending lock writes are drained."""
        if not self._started:
            return

        await self._transport.stop()
        await self._store.stop()
        self._started = False
        logger.info("Application stopped")

    @property
    def started(self) -> bool:
        return self._started

    @property
    def store(self) -> ITraceStore:
        return self._store

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def tracer(self) -> ITracer:
        return self._tracer

    @property
    def reader(self) -> ILogReader:
        return self._reader
