"""Storage of runner state, kept as files in the user's state directory."""

from __future__ import annotations

import os
import shutil
from abc import ABC, abstractmethod
from typing import BinaryIO

import platformdirs

DEFAULT_APP_NAME = "toolhive"
RUN_CONFIGS_DIR = "runconfigs"
FILE_EXTENSION = ".json"


class StateNotFoundError(FileNotFoundError):
    """No state is stored under the requested name."""


class Store(ABC):
    """Operations for saving and retrieving named runner state."""

    @abstractmethod
    def save(self, name: str, reader: BinaryIO) -> None:
        """Store the data read from ``reader`` under ``name``."""

    @abstractmethod
    def load(self, name: str, writer: BinaryIO) -> None:
        """Write the data stored under ``name`` to ``writer``."""

    @abstractmethod
    def get_reader(self, name: str) -> BinaryIO:
        """Return a readable binary stream over the stored data."""

    @abstractmethod
    def get_writer(self, name: str) -> BinaryIO:
        """Return a writable binary stream replacing the stored data."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove the data stored under ``name``."""

    @abstractmethod
    def list(self) -> list[str]:
        """Return the names of all stored states."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Whether data is stored under ``name``."""


class LocalStore(Store):
    """A store keeping one JSON file per name in the user's state directory."""

    def __init__(self, app_name: str = "", *, state_home: str | os.PathLike | None = None) -> None:
        app_name = app_name or DEFAULT_APP_NAME
        root = platformdirs.user_state_dir() if state_home is None else os.fspath(state_home)
        self.base_path = os.path.join(root, app_name, RUN_CONFIGS_DIR)
        try:
            os.makedirs(self.base_path, mode=0o750, exist_ok=True)
        except OSError as exc:
            raise OSError(f"failed to create state directory: {exc}") from exc

    def _file_path(self, name: str) -> str:
        if not name.endswith(FILE_EXTENSION):
            name += FILE_EXTENSION
        return os.path.join(self.base_path, name)

    def _open_for_write(self, name: str) -> BinaryIO:
        try:
            fd = os.open(self._file_path(name), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        except OSError as exc:
            raise OSError(f"failed to create file: {exc}") from exc
        return os.fdopen(fd, "wb")

    def _open_for_read(self, name: str) -> BinaryIO:
        try:
            return open(self._file_path(name), "rb")
        except FileNotFoundError as exc:
            raise StateNotFoundError(f"state '{name}' not found") from exc
        except OSError as exc:
            raise OSError(f"failed to open state file: {exc}") from exc

    def save(self, name: str, reader: BinaryIO) -> None:
        with self._open_for_write(name) as handle:
            try:
                shutil.copyfileobj(reader, handle)
            except OSError as exc:
                raise OSError(f"failed to write data to file: {exc}") from exc

    def load(self, name: str, writer: BinaryIO) -> None:
        with self._open_for_read(name) as handle:
            try:
                shutil.copyfileobj(handle, writer)
            except OSError as exc:
                raise OSError(f"failed to read data from file: {exc}") from exc

    def get_reader(self, name: str) -> BinaryIO:
        return self._open_for_read(name)

    def get_writer(self, name: str) -> BinaryIO:
        return self._open_for_write(name)

    def delete(self, name: str) -> None:
        try:
            os.remove(self._file_path(name))
        except FileNotFoundError as exc:
            raise StateNotFoundError(f"state '{name}' not found") from exc
        except OSError as exc:
            raise OSError(f"failed to delete state file: {exc}") from exc

    def list(self) -> list[str]:
        try:
            entries = sorted(os.scandir(self.base_path), key=lambda entry: entry.name)
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise OSError(f"failed to read state directory: {exc}") from exc
        return [
            entry.name[: -len(FILE_EXTENSION)]
            for entry in entries
            if not entry.is_dir() and entry.name.endswith(FILE_EXTENSION)
        ]

    def exists(self, name: str) -> bool:
        try:
            os.stat(self._file_path(name))
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise OSError(f"failed to check if state exists: {exc}") from exc
        return True


def new_store(app_name: str) -> Store:
    """Create the state store for ``app_name``; only local storage exists."""
    return LocalStore(app_name)