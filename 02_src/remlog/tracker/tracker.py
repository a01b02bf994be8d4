"""Tracer: the ingestion pipeline from raw payload to sink."""

import logging
from typing import Any, Protocol

from ..errors import ValidationError
from ..models import TraceFailure, TraceRecord
from ..normalizer import INormalizer
from ..transports import ITransport


class ITracer(Protocol):
    """Accepting trace beacons."""

    async def trace(
        self,
        payload: Any,
        *,
        forwarded_for: str | None,
        remote_addr: str | None,
    ) -> TraceRecord:
        """Normalize, relay and persist a payload. Raise ValidationError if invalid."""
        ...


class Tracer:
    """Runs Normalizer -> Transport.relay -> Transport.persist."""

    def __init__(
        self,
        normalizer: INormalizer,
        transport: ITransport,
        logger: logging.Logger,
    ):
        self._normalizer = normalizer
        self._transport = transport
        self._logger = logger

    async def trace(
        self,
        payload: Any,
        *,
        forwarded_for: str | None,
        remote_addr: str | None,
    ) -> TraceRecord:
        """Normalize, relay and persist a payload. Raise ValidationError if invalid."""
        result = self._normalizer.normalize(
            payload, forwarded_for=forwarded_for, remote_addr=remote_addr
        )

        if isinstance(result, TraceFailure):
            self._logger.error("Failed parsing payload: %s", result.error)
            raise ValidationError(result.error, failure=result)

        await self._transport.relay(result)
        # Returns once the store has queued the record, see storage.lock
        await self._transport.persist(result)
        return result
