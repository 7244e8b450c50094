"""Permission profiles and mount declarations for containers."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

PROFILE_NONE = "none"
PROFILE_NETWORK = "network"

_RESOURCE_URI = re.compile(r"([a-zA-Z][a-zA-Z0-9_-]*)://([^:]+):([^:]+)")
_HOST_PATH = re.compile(r"([^:]+):([^:]+)")
_COMMAND_INJECTION = re.compile(r"[$&;|]|\$\(|`")


class ProfileError(ValueError):
    """A permission profile could not be read or decoded."""


class MountDeclarationError(ValueError):
    """A mount declaration is malformed or unsafe."""


def _expect_object(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise ProfileError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _bool_field(value: Any, what: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ProfileError(f"{what} must be a boolean")
    return value


def _string_list(value: Any, what: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ProfileError(f"{what} must be a list of strings")
    return list(value)


def _int_list(value: Any, what: str) -> list[int]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(
        isinstance(item, int) and not isinstance(item, bool) for item in value
    ):
        raise ProfileError(f"{what} must be a list of integers")
    return list(value)


class MountDeclaration(str):
    """A mount: ``path``, ``host-path:container-path`` or ``scheme://resource:container-path``."""

    __slots__ = ()

    def parse(self) -> tuple[str, str]:
        """Return the cleaned ``(source, target)`` pair, or raise MountDeclarationError."""
        declaration = str(self)

        match = _RESOURCE_URI.fullmatch(declaration)
        if match:
            scheme, resource, container_path = match.groups()
            _validate_path(resource)
            _validate_path(container_path)
            return f"{scheme}://{_clean_path(resource)}", _clean_path(container_path)

        match = _HOST_PATH.fullmatch(declaration)
        if match:
            host_path, container_path = match.groups()
            _validate_path(host_path)
            _validate_path(container_path)
            return _clean_path(host_path), _clean_path(container_path)

        if ":" not in declaration:
            _validate_path(declaration)
            cleaned = _clean_path(declaration)
            return cleaned, cleaned

        raise MountDeclarationError(
            f"invalid mount declaration format: {declaration} "
            "(expected path, host-path:container-path, or scheme://resource:container-path)"
        )

    def is_valid(self) -> bool:
        try:
            self.parse()
        except MountDeclarationError:
            return False
        return True

    def is_resource_uri(self) -> bool:
        return _RESOURCE_URI.fullmatch(str(self)) is not None

    def get_resource_type(self) -> str:
        """Return the scheme of a resource URI, e.g. ``volume``."""
        match = _RESOURCE_URI.fullmatch(str(self))
        if match is None:
            raise MountDeclarationError(f"not a resource URI: {self}")
        return match.group(1)


def _validate_path(path: str) -> None:
    if _COMMAND_INJECTION.search(path):
        raise MountDeclarationError(f"potential command injection detected in path: {path}")
    if "\x00" in path:
        raise MountDeclarationError(f"null byte detected in path: {path}")


def _clean_path(path: str) -> str:
    """Lexically normalise a slash-separated path."""
    if not path:
        return "."
    rooted = path.startswith("/")
    parts: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not rooted:
                parts.append("..")
            continue
        parts.append(part)
    cleaned = "/".join(parts)
    if rooted:
        return "/" + cleaned
    return cleaned or "."


@dataclass
class OutboundNetworkPermissions:
    """Outbound network rules for a container."""

    insecure_allow_all: bool = False
    allow_transport: list[str] = field(default_factory=list)
    allow_host: list[str] = field(default_factory=list)
    allow_port: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.insecure_allow_all:
            data["insecure_allow_all"] = True
        if self.allow_transport:
            data["allow_transport"] = list(self.allow_transport)
        if self.allow_host:
            data["allow_host"] = list(self.allow_host)
        if self.allow_port:
            data["allow_port"] = list(self.allow_port)
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "OutboundNetworkPermissions":
        mapping = _expect_object(data, "outbound")
        return cls(
            insecure_allow_all=_bool_field(mapping.get("insecure_allow_all"), "insecure_allow_all"),
            allow_transport=_string_list(mapping.get("allow_transport"), "allow_transport"),
            allow_host=_string_list(mapping.get("allow_host"), "allow_host"),
            allow_port=_int_list(mapping.get("allow_port"), "allow_port"),
        )


@dataclass
class NetworkPermissions:
    """Network rules for a container."""

    outbound: OutboundNetworkPermissions | None = None

    def to_dict(self) -> dict:
        if self.outbound is None:
            return {}
        return {"outbound": self.outbound.to_dict()}

    @classmethod
    def from_dict(cls, data: Any) -> "NetworkPermissions":
        mapping = _expect_object(data, "network")
        outbound = mapping.get("outbound")
        return cls(
            outbound=None if outbound is None else OutboundNetworkPermissions.from_dict(outbound)
        )


@dataclass
class Profile:
    """Read and write mounts plus network rules granted to a container."""

    read: list[MountDeclaration] = field(default_factory=list)
    write: list[MountDeclaration] = field(default_factory=list)
    network: NetworkPermissions | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.read:
            data["read"] = [str(mount) for mount in self.read]
        if self.write:
            data["write"] = [str(mount) for mount in self.write]
        if self.network is not None:
            data["network"] = self.network.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Profile":
        if data is None:
            return cls()
        mapping = _expect_object(data, "profile")
        network = mapping.get("network")
        return cls(
            read=[MountDeclaration(item) for item in _string_list(mapping.get("read"), "read")],
            write=[MountDeclaration(item) for item in _string_list(mapping.get("write"), "write")],
            network=None if network is None else NetworkPermissions.from_dict(network),
        )


def _closed_profile(allow_all: bool) -> Profile:
    return Profile(
        network=NetworkPermissions(
            outbound=OutboundNetworkPermissions(insecure_allow_all=allow_all)
        )
    )


def new_profile() -> Profile:
    """Return an empty profile with no network access."""
    return _closed_profile(False)


def builtin_none_profile() -> Profile:
    """Return the built-in profile with no permissions."""
    return _closed_profile(False)


def builtin_network_profile() -> Profile:
    """Return the built-in profile allowing all outbound traffic."""
    return _closed_profile(True)


def from_file(path: str) -> Profile:
    """Load a profile from a JSON file, raising ProfileError on failure."""
    try:
        with open(path, "rb") as handle:
            raw = handle.read()
    except OSError as exc:
        raise ProfileError(f"failed to read permission profile: {exc}") from exc
    try:
        return Profile.from_dict(json.loads(raw))
    except (ValueError, UnicodeDecodeError) as exc:
        raise ProfileError(f"failed to parse permission profile: {exc}") from exc


def parse_mount_declarations(declarations: list[str]) -> list[MountDeclaration]:
    """Turn strings into mount declarations, failing on the first invalid one."""
    result = []
    for declaration in declarations:
        mount = MountDeclaration(declaration)
        try:
            mount.parse()
        except MountDeclarationError as exc:
            raise MountDeclarationError(
                f"invalid mount declaration: {declaration} ({exc})"
            ) from exc
        result.append(mount)
    return result