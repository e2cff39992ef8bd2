"""Streaming BLAKE2b hashing and MAC.

The main entry point is :class:`~blake2mac.engine.Blake2bMac`, an incremental
engine supporting digest lengths of 1..64 bytes, keys of up to 64 bytes and a
16-byte salt. :func:`~blake2mac.hashes.blake2b_digest` covers the one-shot case.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import MacConfig
from .constants import BLOCK_BYTES, MAX_DIGEST_BYTES, MAX_KEY_BYTES, SALT_BYTES
from .engine import Blake2bMac, EngineState
from .errors import (
    Blake2Error,
    EngineStateError,
    InvalidConfigurationError,
    SecureMemoryError,
    TransientFailureError,
)
from .hashes import blake2b_digest, blake2b_hexdigest, verify_mac
from .random import generate_key, generate_salt, random_bytes
from .secure_memory import SecureBuffer

__all__ = [
    "BLOCK_BYTES",
    "Blake2Error",
    "Blake2bMac",
    "EngineState",
    "EngineStateError",
    "InvalidConfigurationError",
    "MAX_DIGEST_BYTES",
    "MAX_KEY_BYTES",
    "MacConfig",
    "SALT_BYTES",
    "SecureBuffer",
    "SecureMemoryError",
    "TransientFailureError",
    "blake2b_digest",
    "blake2b_hexdigest",
    "generate_key",
    "generate_salt",
    "random_bytes",
    "verify_mac",
]
