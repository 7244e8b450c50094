import json

import pytest

from toolhive import logger
from toolhive.logger import LoggerPanic


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch):
    monkeypatch.delenv("UNSTRUCTURED_LOGS", raising=False)
    logger.set_debug(False)
    yield
    logger.set_debug(False)


@pytest.mark.parametrize(
    "env_value, expected",
    [("", True), ("true", True), ("false", False), ("not-a-bool", True)],
)
def test_unstructured_logs_check(monkeypatch, env_value, expected):
    if env_value:
        monkeypatch.setenv("UNSTRUCTURED_LOGS", env_value)
    assert logger.unstructured_logs() is expected


_PLAIN = {
    "DEBUG": logger.debug,
    "INFO": logger.info,
    "WARN": logger.warn,
    "ERROR": logger.error,
}

_FORMATTED = {
    "DEBUG": logger.debugf,
    "INFO": logger.infof,
    "WARN": logger.warnf,
    "ERROR": logger.errorf,
}


@pytest.mark.parametrize(
    "level, message",
    [
        ("DEBUG", "debug message"),
        ("INFO", "info message"),
        ("WARN", "warn message"),
        ("ERROR", "error message"),
    ],
)
def test_structured_logger_plain(monkeypatch, capsys, level, message):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.set_debug(True)
    logger.initialize()
    _PLAIN[level](message, "key", "value")
    entry = json.loads(capsys.readouterr().out)
    assert entry["level"] == level
    assert entry["msg"] == message
    assert entry["key"] == "value"


@pytest.mark.parametrize(
    "level, message, expected",
    [
        ("DEBUG", "debug message %s and %s", "debug message key and value"),
        ("INFO", "info message %s and %s", "info message key and value"),
        ("WARN", "warn message %s and %s", "warn message key and value"),
        ("ERROR", "error message %s and %s", "error message key and value"),
    ],
)
def test_structured_logger_formatted(monkeypatch, capsys, level, message, expected):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.set_debug(True)
    logger.initialize()
    _FORMATTED[level](message, "key", "value")
    entry = json.loads(capsys.readouterr().out)
    assert entry["level"] == level
    assert entry["msg"] == expected


@pytest.mark.parametrize(
    "short, level, message, expected",
    [
        ("DBG", "DEBUG", "debug message %s and %s", "debug message key and value"),
        ("INF", "INFO", "info message %s and %s", "info message key and value"),
        ("WRN", "WARN", "warn message %s and %s", "warn message key and value"),
        ("ERR", "ERROR", "error message %s and %s", "error message key and value"),
    ],
)
def test_unstructured_logger_formatted(capsys, short, level, message, expected):
    logger.set_debug(True)
    logger.initialize()
    _FORMATTED[level](message, "key", "value")
    output = capsys.readouterr().err
    assert short in output
    assert expected in output


def test_initialize_structured(monkeypatch, capsys):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.initialize()
    logger.info("test message", "key", "value")
    entry = json.loads(capsys.readouterr().out)
    assert entry["msg"] == "test message"


def test_initialize_unstructured(monkeypatch, capsys):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "true")
    logger.initialize()
    logger.info("test message", "key", "value")
    captured = capsys.readouterr()
    assert "test message" in captured.err
    assert "INF" in captured.err
    assert captured.out == ""


def test_get_logger_adds_component(monkeypatch, capsys):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.initialize()
    component_logger = logger.get_logger("test-component")
    component_logger.info("component message")
    entry = json.loads(capsys.readouterr().out)
    assert entry["component"] == "test-component"
    assert entry["msg"] == "component message"


def test_debug_suppressed_without_debug_flag(monkeypatch, capsys):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.initialize()
    logger.debug("debug message", "key", "value")
    logger.info("info message")
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["msg"] == "info message"


def test_panic_logs_then_raises(monkeypatch, capsys):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.initialize()
    with pytest.raises(LoggerPanic, match="error message"):
        logger.panic("error message", "key", "value")
    entry = json.loads(capsys.readouterr().out)
    assert entry["level"] == "ERROR"
    assert entry["key"] == "value"


def test_panicf_raises_with_unformatted_message(monkeypatch, capsys):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.initialize()
    with pytest.raises(LoggerPanic) as info:
        logger.panicf("error message %s and %s", "key", "value")
    assert str(info.value) == "error message %s and %s"
    entry = json.loads(capsys.readouterr().out)
    assert entry["msg"] == "error message key and value"


def test_odd_argument_is_bad_key(monkeypatch, capsys):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.initialize()
    logger.info("test message", "value")
    entry = json.loads(capsys.readouterr().out)
    assert entry["!BADKEY"] == "value"


def test_with_values_does_not_change_parent(monkeypatch, capsys):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    base = logger.Logger(structured=True)
    child = base.with_values("key", "value")
    child.info("child")
    base.info("parent")
    first, second = (json.loads(line) for line in capsys.readouterr().out.splitlines())
    assert first["key"] == "value"
    assert "key" not in second


def test_formatted_go_verbs(monkeypatch, capsys):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.initialize()
    logger.infof("Using host port: %d and %v", 8080, "value")
    entry = json.loads(capsys.readouterr().out)
    assert entry["msg"] == "Using host port: 8080 and value"