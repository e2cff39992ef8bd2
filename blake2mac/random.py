"""Secure randomness for keys and salts."""

from __future__ import annotations

import os

from .constants import MAX_KEY_BYTES, SALT_BYTES


def random_bytes(length: int) -> bytes:
    """Return ``length`` cryptographically secure random bytes."""

    if length < 0:
        raise ValueError("length must be non-negative")
    return os.urandom(length)


def generate_key(length: int = MAX_KEY_BYTES) -> bytes:
    """Return a fresh random MAC key of 1..64 bytes."""

    if not 1 <= length <= MAX_KEY_BYTES:
        raise ValueError(f"key length must be in range 1..{MAX_KEY_BYTES}")
    return random_bytes(length)


def generate_salt() -> bytes:
    """Return a fresh random 16-byte salt."""

    return random_bytes(SALT_BYTES)
