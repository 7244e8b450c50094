"""Finding free ports and checking network capabilities."""

from __future__ import annotations

import ipaddress
import os
import secrets
import socket

import psutil

from . import logger

MIN_PORT = 10000
MAX_PORT = 65535
MAX_ATTEMPTS = 10


def _try_bind(sock_type: int, port: int, description: str) -> bool:
    try:
        sock = socket.socket(socket.AF_INET, sock_type)
    except OSError:
        return False
    try:
        if sock_type == socket.SOCK_STREAM and os.name != "nt":
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(("", port))
        if sock_type == socket.SOCK_STREAM:
            sock.listen()
    except (OSError, OverflowError, TypeError):
        sock.close()
        return False
    try:
        sock.close()
    except OSError as exc:
        logger.warnf("Warning: Failed to close %s: %v", description, exc)
    return True


def is_available(port: int) -> bool:
    """Whether both a TCP listener and a UDP socket can bind to ``port``."""
    return _try_bind(socket.SOCK_STREAM, port, "TCP listener") and _try_bind(
        socket.SOCK_DGRAM, port, "UDP connection"
    )


def is_ipv6_available() -> bool:
    """Whether an interface that is up carries a non-loopback IPv6 address."""
    try:
        addresses = psutil.net_if_addrs()
        stats = psutil.net_if_stats()
    except OSError:
        return False
    for name, addrs in addresses.items():
        stat = stats.get(name)
        if stat is None or not stat.isup:
            continue
        for addr in addrs:
            if addr.family != socket.AF_INET6:
                continue
            try:
                ip = ipaddress.IPv6Address(addr.address.split("%", 1)[0])
            except ValueError:
                continue
            if ip.ipv4_mapped is None and not ip.is_loopback:
                return True
    return False


def find_available() -> int:
    """Find a free port: random tries first, then a sequential scan; 0 if none."""
    for _ in range(MAX_ATTEMPTS):
        port = secrets.randbelow(MAX_PORT - MIN_PORT) + MIN_PORT
        if is_available(port):
            return port
    for port in range(MIN_PORT, MAX_PORT + 1):
        if is_available(port):
            return port
    return 0


def find_or_use_port(port: int) -> int:
    """Return ``port`` if it is free, or a free port when ``port`` is 0.

    Raises OSError when no port can be found or the requested one is taken.
    """
    if port == 0:
        found = find_available()
        if found == 0:
            raise OSError("could not find an available port")
        return found
    if port > 0 and not is_available(port):
        raise OSError(f"port {port} is already in use")
    return port