"""Explicit runtime context handed to sinks instead of process-wide singletons."""

import logging
from dataclasses import dataclass

from .config import ServerConfig
from .storage import ITraceStore


@dataclass(frozen=True)
class SinkContext:
    """Collaborators a transport may use."""

    store: ITraceStore
    logger: logging.Logger
    config: ServerConfig
