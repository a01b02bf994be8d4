"""Main entry point for the RemLog collector."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from remlog.api import create_fastapi_app
from remlog.app import Application
from remlog.config import ServerConfig
from remlog.errors import ConfigurationError
from remlog.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main():
    """Run the collector."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    config = ServerConfig.from_env()

    # Unknown transports must stop the process before it binds the port
    try:
        application = Application(config)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        raise SystemExit(1) from e

    app = create_fastapi_app(application)

    ssl_options = {}
    if config.ssl:
        ssl_options = {
            "ssl_certfile": config.ssl.cert,
            "ssl_keyfile": config.ssl.key,
            "ssl_keyfile_password": config.ssl.passphrase,
        }
    logger.info(
        "Server is listening%s at port %s ...",
        " with SSL" if config.ssl else "",
        config.port,
    )

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="info",
        log_config=None,
        **ssl_options,
    )


if __name__ == "__main__":
    main()
