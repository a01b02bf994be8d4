"""API routers."""

from . import info, logs, tracing

__all__ = ["info", "logs", "tracing"]
