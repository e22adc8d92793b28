"""Bridges that route standard-library logging and writers into a Logger."""

from __future__ import annotations

import logging
from typing import Optional

from metamcp.logs.context import Context
from metamcp.logs.logger import Logger


class StdLogAdapter:
    """A file-like writer that logs each write at info level."""

    def __init__(self, logger: Logger, ctx: Optional[Context] = None) -> None:
        self._logger = logger
        self._ctx = ctx

    def write(self, data: str) -> int:
        message = data[:-1] if data.endswith("\n") else data
        self._logger.info(self._ctx, message)
        return len(data)

    def flush(self) -> None:
        """Flush the stream the underlying logger writes to."""
        flush = getattr(self._logger.output, "flush", None)
        if flush is not None:
            flush()


class LoggerHandler(logging.Handler):
    """A ``logging.Handler`` forwarding records to a Logger."""

    def __init__(self, logger: Logger, ctx: Optional[Context] = None) -> None:
        super().__init__()
        self._logger = logger
        self._ctx = ctx

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if record.levelno >= logging.ERROR:
                err = record.exc_info[1] if record.exc_info else None
                self._logger.error(self._ctx, err, message)
            elif record.levelno >= logging.WARNING:
                self._logger.warn(self._ctx, message)
            elif record.levelno >= logging.INFO:
                self._logger.info(self._ctx, message)
            else:
                self._logger.debug(self._ctx, message)
        except Exception:
            self.handleError(record)


def new_std_log_adapter(logger: Logger, ctx: Optional[Context] = None) -> logging.Logger:
    """Return a standalone ``logging.Logger`` whose records go to ``logger``."""
    std_logger = logging.Logger("metamcp.adapter")
    std_logger.propagate = False
    std_logger.addHandler(LoggerHandler(logger, ctx))
    return std_logger