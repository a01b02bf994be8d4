"""Startup-time mapping from sink id to transport implementation."""

from ..context import SinkContext
from ..errors import ConfigurationError
from .base import Transport
from .console import ConsoleTransport
from .generic import GenericTransport
from .sqlite import SqliteTransport

TRANSPORTS: dict[str, type[Transport]] = {
    ConsoleTransport.id: ConsoleTransport,
    GenericTransport.id: GenericTransport,
    SqliteTransport.id: SqliteTransport,
}


def available_transports() -> list[str]:
    return sorted(TRANSPORTS)


def get_transport(transport_id: str) -> type[Transport]:
    """Look up a transport class; unknown ids are a configuration error."""
    try:
        return TRANSPORTS[transport_id]
    except KeyError:
        raise ConfigurationError(
            f"Unknown transport {transport_id!r}, expected one of: "
            f"{', '.join(available_transports())}"
        ) from None


def create_transport(transport_id: str, context: SinkContext) -> Transport:
    return get_transport(transport_id)(context)
