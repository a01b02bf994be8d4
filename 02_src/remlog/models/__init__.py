"""Core data models for RemLog."""

from .tracing import TraceFailure, TraceLevel, TraceRecord, parse_iso, utc_now_iso

__all__ = [
    "TraceRecord",
    "TraceFailure",
    "TraceLevel",
    "parse_iso",
    "utc_now_iso",
]
