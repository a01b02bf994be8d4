"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from remlog.config import ServerConfig  # noqa: E402


@pytest.fixture
def lock_file(tmp_path):
    """Path of a lock file that does not exist yet."""
    return tmp_path / "data" / "remlog.lock.json"


@pytest.fixture
def make_config(tmp_path, lock_file):
    """Build a ServerConfig rooted in tmp_path."""

    def _make(**overrides) -> ServerConfig:
        settings = {
            "transport": "generic",
            "lock_file": lock_file,
            "sqlite_path": tmp_path / "data" / "remlog.db",
        }
        settings.update(overrides)
        return ServerConfig(**settings)

    return _make


@pytest_asyncio.fixture
async def store(lock_file):
    """Create a started trace store writing to a temporary lock file."""
    from remlog.storage import TraceStore

    st = TraceStore(lock_file)
    await st.start()
    yield st
    await st.stop()


@pytest.fixture
def sink_context(store, make_config):
    """Sink context wired to the temporary store."""
    import logging

    from remlog.context import SinkContext

    return SinkContext(
        store=store,
        logger=logging.getLogger("remlog.transport"),
        config=make_config(),
    )


@pytest_asyncio.fixture
async def application(make_config):
    """Started application using the generic (lock file) transport."""
    from remlog.app import Application

    app = Application(make_config())
    await app.start()
    yield app
    await app.stop()


@pytest.fixture
def make_client():
    """Build an httpx client bound to a FastAPI app in-process."""

    def _make(fastapi_app, client_ip: str = "203.0.113.7") -> httpx.AsyncClient:
        transport = httpx.ASGITransport(app=fastapi_app, client=(client_ip, 4711))
        return httpx.AsyncClient(transport=transport, base_url="http://remlog.test")

    return _make


@pytest_asyncio.fixture
async def client(application, make_client):
    """HTTP client for a collector backed by the started application."""
    from remlog.api import create_fastapi_app

    async with make_client(create_fastapi_app(application)) as c:
        yield c
