"""SIM implementation - replays a beacon scenario against a collector."""

import asyncio
import json
import random
import uuid
from typing import Protocol
from urllib.parse import quote

import httpx

from remlog.logging_config import get_logger

logger = get_logger(__name__)

# (channel, level, message) as a browser client would emit them
DEFAULT_SCENARIO = [
    ("post", "info", "Page loaded"),
    ("pixel", "log", "Navigation started"),
    ("post", "warn", "Slow resource detected"),
    ("pixel", "success", "Checkout completed"),
    ("post", "error", "Uncaught TypeError: undefined is not a function"),
]


class ISim(Protocol):
    """Generate test beacons."""

    async def start(self) -> None:
        """Start the scenario in the background."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


class Sim:
    """Sends each scenario step as a JSON POST or a tracking pixel GET."""

    def __init__(
        self,
        api_url: str = "http://localhost:8189",
        scenario: list[tuple[str, str, str]] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        delay: tuple[float, float] = (0.5, 1.5),
    ):
        self._api_url = api_url.rstrip("/")
        self._scenario = scenario or DEFAULT_SCENARIO
        self._transport = transport
        self._delay = delay
        self._running = False
        self._task: asyncio.Task | None = None
        self._client: httpx.AsyncClient | None = None
        self.sent: list[str] = []

    async def start(self) -> None:
        """Start the scenario in the background."""
        if self._running:
            return

        self._running = True
        self._client = httpx.AsyncClient(transport=self._transport, timeout=10.0)
        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client:
            await self._client.aclose()
            self._client = None

    async def run_once(self) -> list[str]:
        """Send the whole scenario without delays; return the accepted ids."""
        accepted = []
        async with httpx.AsyncClient(transport=self._transport, timeout=10.0) as client:
            session = uuid.uuid4().hex[:8]
            for step, (channel, level, message) in enumerate(self._scenario):
                trace_id = await self._send(client, channel, self._beacon(session, step, level, message))
                if trace_id:
                    accepted.append(trace_id)
        self.sent.extend(accepted)
        return accepted

    async def _run_scenario(self) -> None:
        session = uuid.uuid4().hex[:8]
        try:
            for step, (channel, level, message) in enumerate(self._scenario):
                if not self._running or not self._client:
                    break

                trace_id = await self._send(
                    self._client, channel, self._beacon(session, step, level, message)
                )
                if trace_id:
                    self.sent.append(trace_id)

                await asyncio.sleep(random.uniform(*self._delay))

        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False
            logger.info("SIM: scenario finished, %d beacon(s) accepted", len(self.sent))

    @staticmethod
    def _beacon(session: str, step: int, level: str, message: str) -> dict:
        return {
            "id": f"sim-{session}-{step}",
            "level": level,
            "message": message,
            "userAgent": "remlog-sim",
            "host": "spoofed.example",
        }

    async def _send(self, client: httpx.AsyncClient, channel: str, beacon: dict) -> str | None:
        """Send one beacon; return its id when the collector accepted it."""
        try:
            if channel == "pixel":
                query = quote(json.dumps(beacon), safe="")
                response = await client.get(f"{self._api_url}/tracer.jpg?{query}")
                ok = response.status_code == 200 and response.headers.get(
                    "content-type", ""
                ).startswith("image/jpeg")
                trace_id = beacon["id"] if ok else None
            else:
                response = await client.post(f"{self._api_url}/trace", json=beacon)
                trace_id = response.json().get("id") if response.status_code == 200 else None

            if trace_id:
                logger.info("SIM: %s %s -> %s", channel, beacon["message"], trace_id)
            else:
                logger.error("SIM: %s beacon rejected with %s", channel, response.status_code)
            return trace_id

        except httpx.HTTPError as e:
            logger.error("SIM: Failed to send beacon: %s", e)
            return None
