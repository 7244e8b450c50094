"""Authenticated encryption with AES-GCM; output is nonce | ciphertext | tag."""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

MAX_PLAINTEXT_SIZE = 32 * 1024 * 1024
NONCE_SIZE = 12
TAG_SIZE = 16

_KEY_SIZES = frozenset({16, 24, 32})


class ExceedsMaxSizeError(ValueError):
    """The plaintext is larger than the 32 MiB limit."""

    def __init__(self) -> None:
        super().__init__("plaintext is too large, limited to 32MiB")


def _cipher(key: bytes | bytearray | memoryview | None) -> AESGCM:
    raw = bytes(key or b"")
    if len(raw) not in _KEY_SIZES:
        raise ValueError(f"invalid key size {len(raw)}")
    return AESGCM(raw)


def encrypt(plaintext: bytes, key: bytes) -> bytes:
    """Encrypt and authenticate ``plaintext`` under ``key`` with a fresh random nonce.

    Raises ExceedsMaxSizeError for oversized input and ValueError for a bad key.
    """
    data = bytes(plaintext)
    if len(data) > MAX_PLAINTEXT_SIZE:
        raise ExceedsMaxSizeError()
    cipher = _cipher(key)
    nonce = os.urandom(NONCE_SIZE)
    return nonce + cipher.encrypt(nonce, data, None)


def decrypt(ciphertext: bytes, key: bytes) -> bytes:
    """Check and decrypt data produced by :func:`encrypt`.

    Raises ValueError for a bad key, a truncated input or a failed authentication.
    """
    cipher = _cipher(key)
    data = bytes(ciphertext)
    if len(data) < NONCE_SIZE:
        raise ValueError("malformed ciphertext")
    nonce, body = data[:NONCE_SIZE], data[NONCE_SIZE:]
    try:
        return cipher.decrypt(nonce, body, None)
    except InvalidTag:
        raise ValueError("message authentication failed") from None