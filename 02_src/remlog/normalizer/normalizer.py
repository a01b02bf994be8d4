"""Normalizer turning raw beacon payloads into TraceRecords."""

from collections.abc import Mapping
from typing import Any, Callable, Protocol

import pydantic

from ..models import TraceFailure, TraceRecord, utc_now_iso

UNKNOWN_ORIGIN = "unknown"


def resolve_origin(forwarded_for: str | None, remote_addr: str | None) -> str:
    """Client origin: first X-Forwarded-For hop, else the socket address."""
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    return remote_addr or UNKNOWN_ORIGIN


def _describe(exc: pydantic.ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "payload"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


class INormalizer(Protocol):
    """Canonicalization of inbound payloads."""

    def normalize(
        self,
        payload: Any,
        *,
        forwarded_for: str | None,
        remote_addr: str | None,
    ) -> TraceRecord | TraceFailure:
        """Return a TraceRecord, or a TraceFailure when the payload is invalid."""
        ...


class Normalizer:
    """Overwrites host, defaults timestamp and validates against TraceRecord."""

    def __init__(self, clock: Callable[[], str] = utc_now_iso):
        self._clock = clock

    def normalize(
        self,
        payload: Any,
        *,
        forwarded_for: str | None,
        remote_addr: str | None,
    ) -> TraceRecord | TraceFailure:
        if not isinstance(payload, Mapping):
            return TraceFailure(
                error=f"Trace payload must be a JSON object, got {type(payload).__name__}"
            )

        data = dict(payload)
        # Never trust a client supplied host
        data["host"] = resolve_origin(forwarded_for, remote_addr)
        data["timestamp"] = data.get("timestamp") or self._clock()

        try:
            return TraceRecord.model_validate(data)
        except pydantic.ValidationError as exc:
            return TraceFailure(error=_describe(exc))
