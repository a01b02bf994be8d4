"""Replay the default beacon scenario once: python -m sim [api_url]."""

import asyncio
import sys

from remlog.logging_config import setup_logging

from .sim import Sim


def main() -> None:
    setup_logging()
    api_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8189"
    asyncio.run(Sim(api_url=api_url).run_once())


if __name__ == "__main__":
    main()
