import os
import tempfile

import pytest

from toolhive import process


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    return tmp_path


def test_is_detached_when_set(monkeypatch):
    monkeypatch.setenv("TOOLHIVE_DETACHED", "1")
    assert process.is_detached() is True


def test_is_detached_other_value(monkeypatch):
    monkeypatch.setenv("TOOLHIVE_DETACHED", "true")
    assert process.is_detached() is False


def test_is_detached_unset(monkeypatch):
    monkeypatch.delenv("TOOLHIVE_DETACHED", raising=False)
    assert process.is_detached() is False


def test_pid_file_path_in_temp_dir(temp_dir):
    path = process.get_pid_file_path("server")
    assert path == os.path.join(str(temp_dir), "toolhive-server.pid")


def test_write_and_read_round_trip(temp_dir):
    process.write_pid_file("server", 4321)
    assert process.read_pid_file("server") == 4321


def test_write_current_pid(temp_dir):
    process.write_current_pid_file("current")
    assert process.read_pid_file("current") == os.getpid()


def test_read_strips_whitespace(temp_dir):
    with open(process.get_pid_file_path("spaced"), "w") as handle:
        handle.write("  77\n")
    assert process.read_pid_file("spaced") == 77


def test_read_missing_file(temp_dir):
    with pytest.raises(OSError, match="failed to read PID file"):
        process.read_pid_file("missing")


def test_read_invalid_contents(temp_dir):
    with open(process.get_pid_file_path("bad"), "w") as handle:
        handle.write("not-a-pid")
    with pytest.raises(ValueError, match="failed to parse PID"):
        process.read_pid_file("bad")


def test_remove_pid_file(temp_dir):
    process.write_pid_file("gone", 10)
    assert process.read_pid_file("gone") == 10
    process.remove_pid_file("gone")
    with pytest.raises(OSError, match="failed to read PID file"):
        process.read_pid_file("gone")


def test_remove_missing_pid_file(temp_dir):
    with pytest.raises(FileNotFoundError):
        process.remove_pid_file("never-written")


def test_find_current_process():
    assert process.find_process(os.getpid()) is True


def test_find_nonexistent_process():
    assert process.find_process(2**31 - 1) is False


def test_kill_nonexistent_process():
    with pytest.raises(OSError, match="failed to send SIGTERM"):
        process.kill_process(2**31 - 1)