import json

import pytest

from toolhive import logger
from toolhive.logr import LogSink, new_logr


@pytest.fixture(autouse=True)
def _structured(monkeypatch):
    monkeypatch.setenv("UNSTRUCTURED_LOGS", "false")
    logger.set_debug(False)
    logger.initialize()


def _entries(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines()]


def test_info_forwards_message_and_values(capsys):
    new_logr().info(0, "test message", "key", "value")
    (entry,) = _entries(capsys)
    assert entry["level"] == "INFO"
    assert entry["msg"] == "test message"
    assert entry["key"] == "value"


def test_error_adds_error_attribute(capsys):
    new_logr().error(ValueError("secret not found"), "error message", "key", "value")
    (entry,) = _entries(capsys)
    assert entry["level"] == "ERROR"
    assert entry["error"] == "secret not found"
    assert entry["key"] == "value"


def test_with_values_returns_new_sink(capsys):
    sink = new_logr()
    child = sink.with_values("key", "value")
    child.info(0, "child")
    sink.info(0, "parent")
    first, second = _entries(capsys)
    assert first["key"] == "value"
    assert "key" not in second


def test_with_values_keeps_name():
    sink = new_logr().with_name("test-component")
    assert sink.with_values("key", "value").name == "test-component"


def test_with_name_sets_component(capsys):
    sink = new_logr().with_name("test-component")
    sink.info(0, "test message")
    (entry,) = _entries(capsys)
    assert sink.name == "test-component"
    assert entry["component"] == "test-component"


def test_with_name_joins_nested_names(capsys):
    sink = new_logr().with_name("outer").with_name("inner")
    sink.info(0, "test message")
    (entry,) = _entries(capsys)
    assert sink.name == "outer/inner"
    assert entry["component"] == "outer/inner"


@pytest.mark.parametrize("level", [0, 1, 10])
def test_enabled_for_every_level(level):
    assert new_logr().enabled(level) is True


def test_sink_over_custom_logger(capsys):
    sink = LogSink(logger.Logger(structured=True).with_values("component", "custom"))
    sink.init(None)
    sink.info(3, "test message")
    (entry,) = _entries(capsys)
    assert entry["component"] == "custom"
    assert entry["msg"] == "test message"