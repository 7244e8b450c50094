"""A logr-style sink that forwards to the process-wide logger."""

from __future__ import annotations

from typing import Any

from .logger import Logger, _current_logger, get_logger


class LogSink:
    """Adapts :class:`~toolhive.logger.Logger` to the logr sink interface."""

    def __init__(self, logger: Logger, name: str = "") -> None:
        self.logger = logger
        self.name = name
        self.runtime_info: Any = None

    def init(self, info: Any) -> None:
        """Record the runtime information handed over by the caller."""
        self.runtime_info = info

    def enabled(self, level: int) -> bool:
        """Every verbosity level is enabled while a logger is attached."""
        return self.logger is not None

    def info(self, level: int, msg: str, *args: Any) -> None:
        self.logger.info(msg, *args)

    def error(self, err: BaseException | None, msg: str, *args: Any) -> None:
        self.logger.error(msg, "error", err, *args)

    def with_values(self, *args: Any) -> "LogSink":
        """Return a sink whose records carry the given key/value pairs."""
        return LogSink(self.logger.with_values(*args), self.name)

    def with_name(self, name: str) -> "LogSink":
        """Return a sink for a sub-component, joining names with a slash."""
        new_name = f"{self.name}/{name}" if self.name else name
        return LogSink(get_logger(new_name), new_name)


def new_logr() -> LogSink:
    """Return a sink bound to the process-wide logger."""
    return LogSink(_current_logger())