"""Logger configuration: levels, presets and environment-driven setup."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Mapping, Optional, TextIO

ENV_DEVELOPMENT = "development"
ENV_PRODUCTION = "production"
ENV_STAGING = "staging"

_ENV_VARIABLES = ("ENVIRONMENT", "ENV", "GO_ENV")


class LogLevel(IntEnum):
    """Minimum severity a logger emits."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    def __str__(self) -> str:
        return self.name


@dataclass
class Config:
    """Settings for constructing a logger."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    level: LogLevel = LogLevel.INFO
    debug_mode: bool = False
    sanitize: bool = True
    pretty: bool = False


_LEVEL_NAMES = {
    "debug": LogLevel.DEBUG,
    "trace": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warn": LogLevel.WARN,
    "warning": LogLevel.WARN,
    "error": LogLevel.ERROR,
    "fatal": LogLevel.FATAL,
    "panic": LogLevel.FATAL,
}


def parse_log_level(level: str) -> LogLevel:
    """Parse a level name case-insensitively; unknown names mean INFO."""
    return _LEVEL_NAMES.get(level.lower(), LogLevel.INFO)


def _flag(value: str) -> bool:
    return value.lower() == "true" or value == "1"


def _stderr_is_tty() -> bool:
    try:
        return bool(sys.stderr.isatty())
    except (AttributeError, ValueError):
        return False


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build a configuration from environment variables."""
    env = os.environ if environ is None else environ
    cfg = production_config()

    name = next(
        (env[var].lower() for var in _ENV_VARIABLES if env.get(var)),
        "",
    )

    if name in (ENV_DEVELOPMENT, "dev", "local"):
        cfg.pretty = True
        cfg.debug_mode = True
        cfg.level = LogLevel.DEBUG
        cfg.sanitize = False
    elif name in (ENV_STAGING, "stage"):
        cfg.level = LogLevel.DEBUG
        cfg.debug_mode = True
    elif name in (ENV_PRODUCTION, "prod"):
        pass
    elif _stderr_is_tty():
        cfg.pretty = True
        cfg.debug_mode = True
        cfg.level = LogLevel.DEBUG

    if env.get("LOG_LEVEL"):
        cfg.level = parse_log_level(env["LOG_LEVEL"])
    if env.get("DEBUG"):
        cfg.debug_mode = _flag(env["DEBUG"])
    if env.get("LOG_PRETTY"):
        cfg.pretty = _flag(env["LOG_PRETTY"])
    if env.get("LOG_SANITIZE"):
        cfg.sanitize = _flag(env["LOG_SANITIZE"])

    return cfg


def development_config() -> Config:
    return Config(
        output=sys.stderr,
        level=LogLevel.DEBUG,
        debug_mode=True,
        sanitize=False,
        pretty=True,
    )


def production_config() -> Config:
    return Config(
        output=sys.stderr,
        level=LogLevel.INFO,
        debug_mode=False,
        sanitize=True,
        pretty=False,
    )


def testing_config(output: Optional[TextIO] = None) -> Config:
    """Configuration for tests: debug level with JSON output."""
    return Config(
        output=sys.stderr if output is None else output,
        level=LogLevel.DEBUG,
        debug_mode=True,
        sanitize=False,
        pretty=False,
    )