"""Storage module."""

from .lock import ITraceStore, TraceStore

__all__ = ["ITraceStore", "TraceStore"]
