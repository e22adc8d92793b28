"""Structured logging to JSON lines or human-readable console output."""

from __future__ import annotations

import copy
import inspect
import json
import sys
import threading
import traceback
from datetime import datetime
from types import FrameType
from typing import Any, Callable, Mapping, Optional, TextIO

from metamcp.logs.config import Config, LogLevel
from metamcp.logs.context import (
    Context,
    extract_all_context_fields,
    extract_correlation_id,
)
from metamcp.logs.fields import (
    FIELD_COMPONENT,
    FIELD_CORRELATION_ID,
    FIELD_ERROR,
    FIELD_ERROR_TYPE,
)

_LEVEL_NAMES = {
    LogLevel.DEBUG: "debug",
    LogLevel.INFO: "info",
    LogLevel.WARN: "warn",
    LogLevel.ERROR: "error",
    LogLevel.FATAL: "fatal",
}

_CONSOLE_LEVELS = {
    LogLevel.DEBUG: "DBG",
    LogLevel.INFO: "INF",
    LogLevel.WARN: "WRN",
    LogLevel.ERROR: "ERR",
    LogLevel.FATAL: "FTL",
}

_write_lock = threading.Lock()


def _type_name(obj: object) -> str:
    cls = type(obj)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _timestamp() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def _external_frame() -> Optional[FrameType]:
    frame = inspect.currentframe()
    while frame is not None and frame.f_code.co_filename == __file__:
        frame = frame.f_back
    return frame


def _coerce_level(level: Any, fallback: LogLevel) -> LogLevel:
    try:
        return LogLevel(level)
    except ValueError:
        return fallback


def _error_fields(err: Optional[BaseException]) -> dict[str, Any]:
    if err is None:
        return {}
    return {FIELD_ERROR: str(err), FIELD_ERROR_TYPE: _type_name(err)}


class Logger:
    """An immutable structured logger; ``with_*`` methods return new loggers."""

    def __init__(self, config: Optional[Config] = None) -> None:
        cfg = config if config is not None else Config()
        self._output = cfg.output
        self._level = _coerce_level(cfg.level, LogLevel.INFO)
        self._debug_mode = bool(cfg.debug_mode)
        self._sanitize = bool(cfg.sanitize)
        self._pretty = bool(cfg.pretty)
        self._fields: dict[str, Any] = {}

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def debug_mode(self) -> bool:
        return self._debug_mode

    @property
    def sanitize(self) -> bool:
        return self._sanitize

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._fields)

    @property
    def output(self) -> TextIO:
        """The stream records are written to."""
        return self._output if self._output is not None else sys.stderr

    def _derive(self, extra: Mapping[str, Any]) -> "Logger":
        new = copy.copy(self)
        new._fields = {**self._fields, **extra}
        return new

    def with_context(self, ctx: Optional[Context]) -> "Logger":
        correlation_id = extract_correlation_id(ctx)
        if correlation_id:
            return self._derive({FIELD_CORRELATION_ID: correlation_id})
        return self._derive({})

    def with_correlation_id(self, correlation_id: str) -> "Logger":
        return self._derive({FIELD_CORRELATION_ID: correlation_id})

    def with_field(self, key: str, value: Any) -> "Logger":
        return self._derive({key: value})

    def with_fields(self, fields: Mapping[str, Any]) -> "Logger":
        return self._derive(fields)

    def with_component(self, component: str) -> "Logger":
        return self.with_field(FIELD_COMPONENT, component)

    def debug(self, ctx: Optional[Context], msg: str) -> None:
        self.with_context(ctx)._emit(LogLevel.DEBUG, msg)

    def info(self, ctx: Optional[Context], msg: str) -> None:
        self.with_context(ctx)._emit(LogLevel.INFO, msg)

    def warn(self, ctx: Optional[Context], msg: str) -> None:
        self.with_context(ctx)._emit(LogLevel.WARN, msg)

    def error(self, ctx: Optional[Context], err: Optional[BaseException], msg: str) -> None:
        self.with_context(ctx)._emit(LogLevel.ERROR, msg, _error_fields(err))

    def fatal(self, ctx: Optional[Context], err: Optional[BaseException], msg: str) -> None:
        """Log at fatal level and exit with status 1."""
        self.with_context(ctx)._emit(LogLevel.FATAL, msg, _error_fields(err))

    def log_error(
        self,
        ctx: Optional[Context],
        err: Optional[BaseException],
        level: Any,
        message: str,
    ) -> None:
        """Log ``err`` at ``level``, adding caller details in debug mode."""
        if err is None:
            return
        extra = _error_fields(err)
        if self._debug_mode:
            frame = inspect.currentframe()
            caller = frame.f_back if frame is not None else None
            if caller is not None:
                extra["caller_file"] = caller.f_code.co_filename
                extra["caller_line"] = caller.f_lineno
                extra["caller_func"] = caller.f_code.co_name
        self.with_context(ctx)._emit(_coerce_level(level, LogLevel.ERROR), message, extra)

    def log_with_recovery(self, ctx: Optional[Context], fn: Callable[[], Any]) -> None:
        """Run ``fn`` and log, rather than propagate, any exception it raises."""
        try:
            fn()
        except Exception as exc:
            self.with_context(ctx)._emit(
                LogLevel.ERROR,
                "Panic recovered",
                {"panic": repr(exc), "stack": traceback.format_exc()},
            )

    def _emit(
        self, level: LogLevel, msg: str, extra: Optional[Mapping[str, Any]] = None
    ) -> None:
        if level >= self._level:
            record: dict[str, Any] = {"level": _LEVEL_NAMES[level], "time": _timestamp()}
            if self._debug_mode:
                frame = _external_frame()
                if frame is not None:
                    record["caller"] = f"{frame.f_code.co_filename}:{frame.f_lineno}"
            record.update(self._fields)
            if extra:
                record.update(extra)
            record["message"] = msg
            self._write(self._format(level, record))
        if level == LogLevel.FATAL:
            raise SystemExit(1)

    def _format(self, level: LogLevel, record: dict[str, Any]) -> str:
        if not self._pretty:
            return json.dumps(record, default=str)
        rest = {k: v for k, v in record.items() if k not in ("level", "time", "caller", "message")}
        parts = [record["time"], _CONSOLE_LEVELS[level]]
        if "caller" in record:
            parts.append(f"{record['caller']} >")
        parts.append(record["message"])
        parts.extend(
            f"{key}={value if isinstance(value, str) else json.dumps(value, default=str)}"
            for key, value in rest.items()
        )
        return " ".join(parts)

    def _write(self, line: str) -> None:
        output = self.output
        with _write_lock:
            output.write(line + "\n")
            flush = getattr(output, "flush", None)
            if flush is not None:
                flush()


def context_logger(ctx: Optional[Context], logger: Logger) -> Logger:
    """Return ``logger`` with every logging field found in ``ctx`` attached."""
    found = extract_all_context_fields(ctx)
    if not found:
        return logger
    return logger.with_fields(found)


class _DefaultHolder:
    """Holds the process-wide default logger."""

    def __init__(self, logger: Logger) -> None:
        self.logger = logger


_default = _DefaultHolder(
    Logger(Config(output=None, level=LogLevel.INFO, debug_mode=False, sanitize=True, pretty=False))
)


def set_default(logger: Logger) -> None:
    """Replace the default logger used by the module-level functions."""
    _default.logger = logger


def default() -> Logger:
    return _default.logger


def debug(ctx: Optional[Context], msg: str) -> None:
    _default.logger.debug(ctx, msg)


def info(ctx: Optional[Context], msg: str) -> None:
    _default.logger.info(ctx, msg)


def warn(ctx: Optional[Context], msg: str) -> None:
    _default.logger.warn(ctx, msg)


def error(ctx: Optional[Context], err: Optional[BaseException], msg: str) -> None:
    _default.logger.error(ctx, err, msg)


def fatal(ctx: Optional[Context], err: Optional[BaseException], msg: str) -> None:
    _default.logger.fatal(ctx, err, msg)