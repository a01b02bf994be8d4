"""Reader module."""

from .log_reader import ILogReader, LogReader

__all__ = ["ILogReader", "LogReader"]
