"""Tests for Tracer."""

import logging
from unittest.mock import AsyncMock, Mock

import pytest

from remlog.errors import ValidationError
from remlog.models import TraceFailure, TraceRecord
from remlog.normalizer import Normalizer
from remlog.tracker import Tracer


@pytest.fixture
def mock_transport():
    transport = Mock()
    transport.relay = AsyncMock()
    transport.persist = AsyncMock()
    return transport


@pytest.fixture
def tracer(mock_transport):
    return Tracer(Normalizer(), mock_transport, logging.getLogger("remlog.tracer"))


class TestTracerTrace:
    """Tests for Tracer.trace()."""

    async def test_trace_relays_then_persists(self, tracer, mock_transport):
        """Test that a valid payload flows through relay and persist."""
        calls = []
        mock_transport.relay.side_effect = lambda record: calls.append(("relay", record.id))
        mock_transport.persist.side_effect = lambda record: calls.append(("persist", record.id))

        record = await tracer.trace({"id": "abc123"}, forwarded_for=None, remote_addr="10.0.0.1")

        assert isinstance(record, TraceRecord)
        assert record.id == "abc123"
        assert record.host == "10.0.0.1"
        assert calls == [("relay", "abc123"), ("persist", "abc123")]

    async def test_trace_generates_id(self, tracer):
        record = await tracer.trace({}, forwarded_for=None, remote_addr="10.0.0.1")
        assert record.id

    async def test_invalid_payload_raises(self, tracer, mock_transport, caplog):
        """Test that invalid payloads never reach the transport."""
        with caplog.at_level(logging.ERROR, logger="remlog.tracer"):
            with pytest.raises(ValidationError) as exc_info:
                await tracer.trace(
                    {"level": "fatal"}, forwarded_for=None, remote_addr="10.0.0.1"
                )

        assert isinstance(exc_info.value.failure, TraceFailure)
        assert exc_info.value.failure.id is None
        assert "Failed parsing payload" in caplog.text
        mock_transport.relay.assert_not_awaited()
        mock_transport.persist.assert_not_awaited()

    async def test_persist_errors_propagate(self, tracer, mock_transport):
        mock_transport.persist.side_effect = RuntimeError("sink down")
        with pytest.raises(RuntimeError, match="sink down"):
            await tracer.trace({"id": "a"}, forwarded_for=None, remote_addr="h")
