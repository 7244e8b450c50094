"""Data types describing the MCP server registry."""

from __future__ import annotations

import datetime as _dt
import re
from dataclasses import dataclass, field
from typing import Any

from .permissions import Profile

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))"
)


def _parse_rfc3339(text: str) -> _dt.datetime:
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f'parsing time "{text}" as RFC3339: invalid format')
    year, month, day, hour, minute, second, fraction, zulu, sign, off_h, off_m = match.groups()
    micro = int((fraction or "0")[:6].ljust(6, "0"))
    if zulu:
        tz = _dt.timezone.utc
    else:
        offset = _dt.timedelta(hours=int(off_h), minutes=int(off_m))
        if int(off_h) >= 24 or int(off_m) >= 60:
            raise ValueError(f'parsing time "{text}": time zone offset out of range')
        tz = _dt.timezone(-offset if sign == "-" else offset)
    try:
        return _dt.datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
        )
    except ValueError as exc:
        raise ValueError(f'parsing time "{text}": {exc}') from exc


def _object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object, got {type(data).__name__}")
    return data


def _str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _int(data: dict, key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return value


def _bool(data: dict, key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean")
    return value


def _str_list(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{key} must be a list of strings")
    return list(value)


@dataclass
class EnvVar:
    """An environment variable an MCP server accepts."""

    name: str = ""
    description: str = ""
    required: bool = False
    default: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "EnvVar":
        mapping = _object(data, "env var")
        return cls(
            name=_str(mapping, "name"),
            description=_str(mapping, "description"),
            required=_bool(mapping, "required"),
            default=_str(mapping, "default"),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "required": self.required,
        }
        if self.default:
            data["default"] = self.default
        return data


@dataclass
class Metadata:
    """Popularity figures and update time of an MCP server."""

    stars: int = 0
    pulls: int = 0
    last_updated: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Metadata":
        mapping = _object(data, "metadata")
        return cls(
            stars=_int(mapping, "stars"),
            pulls=_int(mapping, "pulls"),
            last_updated=_str(mapping, "last_updated"),
        )

    def to_dict(self) -> dict:
        return {"stars": self.stars, "pulls": self.pulls, "last_updated": self.last_updated}

    def parsed_time(self) -> _dt.datetime:
        """Return ``last_updated`` parsed as an RFC 3339 timestamp."""
        return _parse_rfc3339(self.last_updated)


@dataclass
class Server:
    """An MCP server entry in the registry."""

    name: str = ""
    image: str = ""
    description: str = ""
    transport: str = ""
    target_port: int = 0
    permissions: Profile | None = None
    tools: list[str] = field(default_factory=list)
    env_vars: list[EnvVar] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    metadata: Metadata | None = None
    repository_url: str = ""
    tags: list[str] = field(default_factory=list)
    docker_tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Server":
        mapping = _object(data, "server")
        permissions = mapping.get("permissions")
        metadata = mapping.get("metadata")
        env_vars = mapping.get("env_vars")
        if env_vars is not None and not isinstance(env_vars, list):
            raise ValueError("env_vars must be a list")
        return cls(
            name=_str(mapping, "name"),
            image=_str(mapping, "image"),
            description=_str(mapping, "description"),
            transport=_str(mapping, "transport"),
            target_port=_int(mapping, "target_port"),
            permissions=None if permissions is None else Profile.from_dict(permissions),
            tools=_str_list(mapping, "tools"),
            env_vars=[EnvVar.from_dict(item) for item in env_vars or []],
            args=_str_list(mapping, "args"),
            metadata=None if metadata is None else Metadata.from_dict(metadata),
            repository_url=_str(mapping, "repository_url"),
            tags=_str_list(mapping, "tags"),
            docker_tags=_str_list(mapping, "docker_tags"),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.name:
            data["name"] = self.name
        data["image"] = self.image
        data["description"] = self.description
        data["transport"] = self.transport
        if self.target_port:
            data["target_port"] = self.target_port
        data["permissions"] = None if self.permissions is None else self.permissions.to_dict()
        data["tools"] = list(self.tools)
        data["env_vars"] = [env.to_dict() for env in self.env_vars]
        data["args"] = list(self.args)
        data["metadata"] = None if self.metadata is None else self.metadata.to_dict()
        if self.repository_url:
            data["repository_url"] = self.repository_url
        if self.tags:
            data["tags"] = list(self.tags)
        if self.docker_tags:
            data["docker_tags"] = list(self.docker_tags)
        return data


@dataclass
class Registry:
    """The top-level registry document: version, update time and servers by name."""

    version: str = ""
    last_updated: str = ""
    servers: dict[str, Server] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Registry":
        mapping = _object(data, "registry")
        servers = mapping.get("servers")
        if servers is None:
            servers = {}
        servers = _object(servers, "servers")
        return cls(
            version=_str(mapping, "version"),
            last_updated=_str(mapping, "last_updated"),
            servers={name: Server.from_dict(entry) for name, entry in servers.items()},
        )

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "last_updated": self.last_updated,
            "servers": {name: server.to_dict() for name, server in self.servers.items()},
        }