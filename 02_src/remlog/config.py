"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

APP_NAME = "remlog-server"
APP_VERSION = "1.0.0"

PROJECT_ROOT = Path(os.getenv("REMLOG_HOME", Path(__file__).resolve().parent.parent.parent))
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
GENERIC_TRANSPORT_LOGFILE = DATA_DIR / "remlog.lock.json"
DEFAULT_SQLITE_PATH = DATA_DIR / "remlog.db"
DEFAULT_LOG_PATH = LOGS_DIR / "remlog.log"

DEFAULT_PORT = 8189
DEFAULT_TRANSPORT = "console"
CORS_ALL_HOSTS_ENABLED = ["*"]


PathLike = Union[str, Path]


def resolve_path(env_value: PathLike | None, default: Path) -> Path:
    """Resolve a configured path against the project root."""
    if not env_value:
        return default

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def parse_cors(value: str | None) -> list[str]:
    """Parse a comma-separated origin allow-list; empty means unrestricted."""
    if not value:
        return list(CORS_ALL_HOSTS_ENABLED)

    origins = [origin.strip() for origin in value.split(",") if origin.strip()]
    return origins or list(CORS_ALL_HOSTS_ENABLED)


@dataclass(frozen=True)
class SslConfig:
    """TLS key material for the listener."""

    cert: str
    key: str | None = None
    passphrase: str | None = None


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide settings, fixed at startup."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    transport: str = DEFAULT_TRANSPORT
    cors: list[str] = field(default_factory=lambda: list(CORS_ALL_HOSTS_ENABLED))
    ssl: SslConfig | None = None
    lock_file: Path = GENERIC_TRANSPORT_LOGFILE
    sqlite_path: Path = DEFAULT_SQLITE_PATH
    queue_size: int = 1024
    queue_timeout: float = 5.0

    @property
    def cors_unrestricted(self) -> bool:
        return self.cors == CORS_ALL_HOSTS_ENABLED

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Build the configuration from REMLOG_* environment variables."""
        ssl = None
        cert = os.getenv("REMLOG_SSL_CERT")
        if cert:
            ssl = SslConfig(
                cert=cert,
                key=os.getenv("REMLOG_SSL_KEY"),
                passphrase=os.getenv("REMLOG_SSL_PASSPHRASE"),
            )

        return cls(
            host=os.getenv("REMLOG_HOST", "0.0.0.0"),
            port=int(os.getenv("REMLOG_PORT", str(DEFAULT_PORT))),
            transport=os.getenv("REMLOG_TRANSPORT") or DEFAULT_TRANSPORT,
            cors=parse_cors(os.getenv("REMLOG_CORS")),
            ssl=ssl,
            lock_file=resolve_path(os.getenv("REMLOG_LOCK_FILE"), GENERIC_TRANSPORT_LOGFILE),
            sqlite_path=resolve_path(os.getenv("REMLOG_SQLITE_PATH"), DEFAULT_SQLITE_PATH),
            queue_size=int(os.getenv("REMLOG_QUEUE_SIZE", "1024")),
            queue_timeout=float(os.getenv("REMLOG_QUEUE_TIMEOUT", "5.0")),
        )
