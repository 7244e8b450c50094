"""PID files, detached-mode detection and process signalling."""

from __future__ import annotations

import errno
import os
import re
import signal
import tempfile

import psutil

TOOLHIVE_DETACHED_ENV = "TOOLHIVE_DETACHED"
TOOLHIVE_DETACHED_VALUE = "1"

_PID_TEXT = re.compile(r"[+-]?\d+")


def is_detached() -> bool:
    """Whether this process was started in detached mode."""
    return os.environ.get(TOOLHIVE_DETACHED_ENV) == TOOLHIVE_DETACHED_VALUE


def find_process(pid: int) -> bool:
    """Whether a process with ``pid`` is running.

    Raises OSError when the check itself fails, e.g. for lack of permission.
    """
    if os.name == "nt":
        try:
            return psutil.pid_exists(pid)
        except (OSError, psutil.Error) as exc:
            raise OSError(f"error checking process: {exc}") from exc
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except OverflowError as exc:
        raise OSError(f"failed to find process: {exc}") from exc
    except OSError as exc:
        if exc.errno == errno.ESRCH:
            return False
        raise OSError(f"error checking process: {exc}") from exc
    return True


def get_pid_file_path(container_base_name: str) -> str:
    """Path of the PID file for a container, inside the system temporary directory."""
    return os.path.join(tempfile.gettempdir(), f"toolhive-{container_base_name}.pid")


def write_pid_file(container_base_name: str, pid: int) -> None:
    """Write ``pid`` to the container's PID file, readable by the owner only."""
    path = get_pid_file_path(container_base_name)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="ascii") as handle:
        handle.write(str(int(pid)))


def write_current_pid_file(container_base_name: str) -> None:
    """Write this process's ID to the container's PID file."""
    write_pid_file(container_base_name, os.getpid())


def read_pid_file(container_base_name: str) -> int:
    """Read the process ID stored in the container's PID file.

    Raises OSError if the file cannot be read and ValueError if it holds no integer.
    """
    path = get_pid_file_path(container_base_name)
    try:
        with open(path, "rb") as handle:
            raw = handle.read()
    except OSError as exc:
        raise OSError(f"failed to read PID file: {exc}") from exc
    text = raw.decode("utf-8", errors="replace").strip()
    if not _PID_TEXT.fullmatch(text):
        raise ValueError(f"failed to parse PID: invalid syntax {text!r}")
    return int(text)


def remove_pid_file(container_base_name: str) -> None:
    """Delete the container's PID file."""
    os.remove(get_pid_file_path(container_base_name))


def kill_process(pid: int) -> None:
    """Send SIGTERM to ``pid``; raises OSError if the signal cannot be sent."""
    try:
        os.kill(pid, signal.SIGTERM)
    except (OSError, OverflowError) as exc:
        raise OSError(f"failed to send SIGTERM to process: {exc}") from exc