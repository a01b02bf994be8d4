"""Transports module."""

from .base import ITransport, Transport
from .console import ConsoleTransport
from .generic import GenericTransport
from .registry import TRANSPORTS, available_transports, create_transport, get_transport
from .sqlite import SqliteTransport

__all__ = [
    "ITransport",
    "Transport",
    "ConsoleTransport",
    "GenericTransport",
    "SqliteTransport",
    "TRANSPORTS",
    "available_transports",
    "create_transport",
    "get_transport",
]
