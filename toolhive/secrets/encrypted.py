"""A secrets provider that keeps its secrets in an AES-GCM encrypted file."""

from __future__ import annotations

import json
import os
import threading

from .aes import decrypt, encrypt
from .provider import Provider, SecretsError


class EncryptedManager(Provider):
    """Secrets held in memory and mirrored to an encrypted JSON file."""

    def __init__(self, file_path: str, key: bytes, secrets: dict[str, str] | None = None) -> None:
        self.file_path = file_path
        self._key = bytes(key)
        self._secrets: dict[str, str] = dict(secrets or {})
        self._lock = threading.RLock()

    def get_secret(self, name: str) -> str:
        if not name:
            raise SecretsError("secret name cannot be empty")
        with self._lock:
            try:
                return self._secrets[name]
            except KeyError:
                raise SecretsError(f"secret not found: {name}") from None

    def set_secret(self, name: str, value: str) -> None:
        if not name:
            raise SecretsError("secret name cannot be empty")
        with self._lock:
            self._secrets[name] = value
            self._update_file()

    def delete_secret(self, name: str) -> None:
        if not name:
            raise SecretsError("secret name cannot be empty")
        with self._lock:
            if name not in self._secrets:
                raise SecretsError(f"cannot delete non-existent secret: {name}")
            del self._secrets[name]
            self._update_file()

    def list_secrets(self) -> list[str]:
        with self._lock:
            return list(self._secrets)

    def cleanup(self) -> None:
        with self._lock:
            self._secrets = {}
            self._update_file()

    def _update_file(self) -> None:
        contents = json.dumps(
            {"secrets": self._secrets}, separators=(",", ":"), sort_keys=True
        ).encode("utf-8")
        try:
            encrypted = encrypt(contents, self._key)
        except ValueError as exc:
            raise SecretsError(f"failed to encrypt secrets: {exc}") from exc
        try:
            fd = os.open(self.file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as handle:
                handle.write(encrypted)
        except OSError as exc:
            raise SecretsError(f"failed to write secrets to file: {exc}") from exc


def _decode_secrets(raw: bytes) -> dict[str, str]:
    document = json.loads(raw)
    if not isinstance(document, dict):
        raise ValueError("secrets file must hold an object")
    secrets = document.get("secrets")
    if secrets is None:
        return {}
    if not isinstance(secrets, dict) or not all(
        isinstance(value, str) for value in secrets.values()
    ):
        raise ValueError("secrets must map names to strings")
    return dict(secrets)


def new_encrypted_manager(file_path: str, key: bytes) -> EncryptedManager:
    """Open (creating if needed) the encrypted secrets file and load its contents."""
    if not key:
        raise SecretsError("key cannot be empty")
    file_path = os.path.normpath(os.fspath(file_path))
    try:
        fd = os.open(file_path, os.O_CREAT | os.O_RDWR, 0o600)
    except OSError as exc:
        raise SecretsError(f"failed to open secrets file: {exc}") from exc
    try:
        with os.fdopen(fd, "rb") as handle:
            encrypted = handle.read()
    except OSError as exc:
        raise SecretsError(f"failed to read secrets file: {exc}") from exc

    secrets: dict[str, str] = {}
    if encrypted:
        try:
            decrypted = decrypt(encrypted, key)
        except ValueError as exc:
            raise SecretsError(f"unable to decrypt secrets file: {exc}") from exc
        try:
            secrets = _decode_secrets(decrypted)
        except (ValueError, UnicodeDecodeError) as exc:
            raise SecretsError(f"failed to decode secrets file: {exc}") from exc

    return EncryptedManager(file_path, key, secrets)