"""A read-only secrets provider backed by a 1Password secrets service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .provider import Provider, SecretsError

TIMEOUT = 5.0
_REFERENCE_SCHEME = "op://"


class OPSecretsService(ABC):
    """Resolves ``op://`` secret references to their values."""

    @abstractmethod
    def resolve(self, secret_reference: str, timeout: float) -> str:
        """Return the value the reference points at, within ``timeout`` seconds."""


class OnePasswordManager(Provider):
    """Reads secrets through a 1Password service; changing them is not supported."""

    def __init__(self, secrets_service: OPSecretsService) -> None:
        self._secrets_service = secrets_service

    def get_secret(self, path: str) -> str:
        if _REFERENCE_SCHEME not in path:
            raise SecretsError(f"invalid secret path: {path}")
        try:
            return self._secrets_service.resolve(path, TIMEOUT)
        except Exception as exc:
            raise SecretsError(f"error resolving secret: {exc}") from exc

    def set_secret(self, name: str, value: str) -> None:
        """Not supported; does nothing."""

    def delete_secret(self, name: str) -> None:
        """Not supported; does nothing."""

    def list_secrets(self) -> list[str]:
        """Not supported; always empty."""
        return []

    def cleanup(self) -> None:
        """Nothing to clean up."""