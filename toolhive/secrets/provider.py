"""The secrets provider interface and parsing of secret parameters."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

_SECRET_PARAM = re.compile(r"([^,]+),target=(.+)")


class SecretsError(Exception):
    """A secrets operation failed."""


class Provider(ABC):
    """Something that can store and retrieve named secrets."""

    @abstractmethod
    def get_secret(self, name: str) -> str:
        """Return the value of the secret ``name``."""

    @abstractmethod
    def set_secret(self, name: str, value: str) -> None:
        """Store ``value`` under ``name``."""

    @abstractmethod
    def delete_secret(self, name: str) -> None:
        """Remove the secret ``name``."""

    @abstractmethod
    def list_secrets(self) -> list[str]:
        """Return the names of all stored secrets."""

    @abstractmethod
    def cleanup(self) -> None:
        """Remove every secret this provider manages."""


@dataclass(frozen=True)
class SecretParameter:
    """A parsed ``<name>,target=<target>`` secret parameter."""

    name: str
    target: str


def parse_secret_parameter(parameter: str) -> SecretParameter:
    """Parse ``<name>,target=<target>``; raises SecretsError on bad input."""
    if not parameter:
        raise SecretsError("secret parameter cannot be empty")
    match = _SECRET_PARAM.fullmatch(parameter)
    if match is None:
        raise SecretsError(f"invalid secret parameter format: {parameter}")
    return SecretParameter(name=match.group(1), target=match.group(2))