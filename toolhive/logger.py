"""Process-wide logging with structured JSON or plain console output."""

from __future__ import annotations

import datetime as _dt
import json
import os
import re
import sys
from enum import IntEnum
from typing import Any, Iterable

UNSTRUCTURED_LOGS_ENV = "UNSTRUCTURED_LOGS"

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_FORMAT_VERB = re.compile(r"%%|%([-+# 0]*\d*(?:\.\d+)?)([a-zA-Z])")
_NEEDS_QUOTING = re.compile(r'[\s="\\]|[^\x20-\x7e]')


class Level(IntEnum):
    """Severity of a log record."""

    DEBUG = -4
    INFO = 0
    WARN = 4
    ERROR = 8

    @property
    def short_name(self) -> str:
        return {
            Level.DEBUG: "DBG",
            Level.INFO: "INF",
            Level.WARN: "WRN",
            Level.ERROR: "ERR",
        }[self]


class LoggerPanic(Exception):
    """Raised after a panic-level message has been logged."""


def _convert_verb(match: re.Match) -> str:
    if match.group(0) == "%%":
        return "%%"
    flags, verb = match.group(1), match.group(2)
    if verb in ("v", "t", "w"):
        verb = "s"
    elif verb == "q":
        verb = "r"
    return f"%{flags}{verb}"


def _sprintf(msg: str, args: Iterable[Any]) -> str:
    """Format ``msg`` with printf-style verbs, accepting %v, %q and %w too."""
    args = tuple(args)
    template = _FORMAT_VERB.sub(_convert_verb, msg)
    try:
        return template % args
    except (TypeError, ValueError):
        if not args:
            return msg
        return " ".join([msg, *(str(arg) for arg in args)])


def _attrs_from(args: Iterable[Any]) -> list[tuple[str, Any]]:
    """Turn alternating keys and values into attribute pairs."""
    items = list(args)
    attrs: list[tuple[str, Any]] = []
    while items:
        key = items.pop(0)
        if isinstance(key, str) and items:
            attrs.append((key, items.pop(0)))
        else:
            attrs.append(("!BADKEY", key))
    return attrs


def _json_default(value: Any) -> Any:
    return str(value)


def _json_value(value: Any) -> Any:
    if isinstance(value, BaseException):
        return str(value)
    return value


def _console_value(value: Any) -> str:
    text = str(value)
    if not text or _NEEDS_QUOTING.search(text):
        return json.dumps(text)
    return text


def _kitchen_time(now: _dt.datetime) -> str:
    hour = now.hour % 12 or 12
    suffix = "PM" if now.hour >= 12 else "AM"
    return f"{hour}:{now.minute:02d}{suffix}"


class Logger:
    """A leveled logger writing JSON to stdout or console lines to stderr."""

    def __init__(
        self,
        *,
        structured: bool = True,
        level: Level = Level.INFO,
        attrs: Iterable[tuple[str, Any]] = (),
    ) -> None:
        self.structured = structured
        self.level = Level(level)
        self._attrs = tuple(attrs)

    def with_values(self, *args: Any) -> "Logger":
        """Return a logger that adds the given key/value pairs to every record."""
        return Logger(
            structured=self.structured,
            level=self.level,
            attrs=self._attrs + tuple(_attrs_from(args)),
        )

    def _log(self, level: Level, msg: str, args: Iterable[Any]) -> None:
        if level < self.level:
            return
        attrs = [*self._attrs, *_attrs_from(args)]
        now = _dt.datetime.now().astimezone()
        if self.structured:
            record: dict[str, Any] = {
                "time": now.isoformat(),
                "level": level.name,
                "msg": msg,
            }
            for key, value in attrs:
                record[key] = _json_value(value)
            line = json.dumps(record, default=_json_default, ensure_ascii=False)
            stream = sys.stdout
        else:
            parts = [_kitchen_time(now), level.short_name, msg]
            parts.extend(f"{key}={_console_value(value)}" for key, value in attrs)
            line = " ".join(parts)
            stream = sys.stderr
        stream.write(line + "\n")
        stream.flush()

    def debug(self, msg: str, *args: Any) -> None:
        self._log(Level.DEBUG, msg, args)

    def debugf(self, msg: str, *args: Any) -> None:
        self._log(Level.DEBUG, _sprintf(msg, args), ())

    def info(self, msg: str, *args: Any) -> None:
        self._log(Level.INFO, msg, args)

    def infof(self, msg: str, *args: Any) -> None:
        self._log(Level.INFO, _sprintf(msg, args), ())

    def warn(self, msg: str, *args: Any) -> None:
        self._log(Level.WARN, msg, args)

    def warnf(self, msg: str, *args: Any) -> None:
        self._log(Level.WARN, _sprintf(msg, args), ())

    def error(self, msg: str, *args: Any) -> None:
        self._log(Level.ERROR, msg, args)

    def errorf(self, msg: str, *args: Any) -> None:
        self._log(Level.ERROR, _sprintf(msg, args), ())

    def panic(self, msg: str, *args: Any) -> None:
        """Log at error level, then raise :class:`LoggerPanic`."""
        self.error(msg, *args)
        raise LoggerPanic(msg)

    def panicf(self, msg: str, *args: Any) -> None:
        """Log a formatted message at error level, then raise :class:`LoggerPanic`."""
        self.errorf(msg, *args)
        raise LoggerPanic(msg)


_debug_enabled = False
_log: Logger | None = None


def unstructured_logs() -> bool:
    """Whether console output is wanted; true unless UNSTRUCTURED_LOGS says false."""
    value = os.environ.get(UNSTRUCTURED_LOGS_ENV, "")
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return True


def set_debug(enabled: bool) -> None:
    """Choose whether loggers created by :func:`initialize` emit debug records."""
    global _debug_enabled
    _debug_enabled = bool(enabled)


def _log_level() -> Level:
    return Level.DEBUG if _debug_enabled else Level.INFO


def initialize() -> None:
    """Create the process-wide logger from the environment and debug setting."""
    global _log
    _log = Logger(structured=not unstructured_logs(), level=_log_level())


def _current_logger() -> Logger:
    if _log is None:
        initialize()
    assert _log is not None
    return _log


def get_logger(component: str) -> Logger:
    """Return the process-wide logger tagged with a component name."""
    return _current_logger().with_values("component", component)


def debug(msg: str, *args: Any) -> None:
    _current_logger().debug(msg, *args)


def debugf(msg: str, *args: Any) -> None:
    _current_logger().debugf(msg, *args)


def info(msg: str, *args: Any) -> None:
    _current_logger().info(msg, *args)


def infof(msg: str, *args: Any) -> None:
    _current_logger().infof(msg, *args)


def warn(msg: str, *args: Any) -> None:
    _current_logger().warn(msg, *args)


def warnf(msg: str, *args: Any) -> None:
    _current_logger().warnf(msg, *args)


def error(msg: str, *args: Any) -> None:
    _current_logger().error(msg, *args)


def errorf(msg: str, *args: Any) -> None:
    _current_logger().errorf(msg, *args)


def panic(msg: str, *args: Any) -> None:
    _current_logger().panic(msg, *args)


def panicf(msg: str, *args: Any) -> None:
    _current_logger().panicf(msg, *args)