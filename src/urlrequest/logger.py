"""Logging wrapper shared by the facade, builders and transports."""

from __future__ import annotations

import logging
from typing import Any, Literal

LogLevel = Literal["trace", "debug", "info", "warn", "error"]

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

ROOT_LOGGER_NAME = "urlrequest"

_LEVEL_MAP: dict[LogLevel, int] = {
    "trace": TRACE_LEVEL,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class BoundLogger:
    """Wraps a logging.Logger with a minimum level chosen per facade."""

    def __init__(self, logger: logging.Logger | None = None, *, level: LogLevel = "info") -> None:
        self._logger = logger or logging.getLogger(ROOT_LOGGER_NAME)
        self._level = level

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def level(self) -> LogLevel:
        return self._level

    def trace(self, msg: str, *args: Any) -> None:
        self._log("trace", msg, *args)

    def debug(self, msg: str, *args: Any) -> None:
        self._log("debug", msg, *args)

    def info(self, msg: str, *args: Any) -> None:
        self._log("info", msg, *args)

    def warn(self, msg: str, *args: Any) -> None:
        self._log("warn", msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self._log("error", msg, *args)

    def child(self, name: str) -> "BoundLogger":
        """Derive `<parent>.<name>` keeping the same minimum level."""
        return BoundLogger(self._logger.getChild(name), level=self._level)

    def _log(self, level: LogLevel, msg: str, *args: Any) -> None:
        if _LEVEL_MAP[level] < _LEVEL_MAP[self._level]:
            return
        try:
            self._logger.log(_LEVEL_MAP[level], msg, *args)
        except Exception:
            # Logging must never break a dispatch
            pass


def create_logger(*, logger: Any | None = None, level: LogLevel = "info") -> BoundLogger:
    if isinstance(logger, BoundLogger):
        return logger
    if logger is not None and not isinstance(logger, logging.Logger):
        raise TypeError(f"Expected logging.Logger or BoundLogger, got {type(logger).__name__}")
    return BoundLogger(logger, level=level)


__all__ = ["BoundLogger", "LogLevel", "ROOT_LOGGER_NAME", "TRACE_LEVEL", "create_logger"]
