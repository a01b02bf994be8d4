"""RemLog trace beacon collector."""

from .app import Application, IApplication
from .config import APP_NAME, APP_VERSION, ServerConfig, SslConfig
from .context import SinkContext
from .errors import (
    ConfigurationError,
    NotFoundError,
    OriginNotAllowedError,
    RemlogError,
    StoreUnavailableError,
    ValidationError,
)
from .models import TraceFailure, TraceRecord
from .normalizer import INormalizer, Normalizer
from .reader import ILogReader, LogReader
from .storage import ITraceStore, TraceStore
from .tracker import ITracer, Tracer
from .transports import (
    ConsoleTransport,
    GenericTransport,
    ITransport,
    SqliteTransport,
    create_transport,
    get_transport,
)

__version__ = APP_VERSION

__all__ = [
    # Application
    "Application",
    "IApplication",
    "ServerConfig",
    "SslConfig",
    "SinkContext",
    "APP_NAME",
    "APP_VERSION",
    # Models
    "TraceRecord",
    "TraceFailure",
    # Errors
    "RemlogError",
    "ValidationError",
    "NotFoundError",
    "StoreUnavailableError",
    "ConfigurationError",
    "OriginNotAllowedError",
    # Components
    "INormalizer",
    "Normalizer",
    "ITransport",
    "ConsoleTransport",
    "GenericTransport",
    "SqliteTransport",
    "create_transport",
    "get_transport",
    "ITraceStore",
    "TraceStore",
    "ILogReader",
    "LogReader",
    "ITracer",
    "Tracer",
]
