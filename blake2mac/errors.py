"""Shared exceptions for :mod:`blake2mac`.

The library raises a small set of domain-specific exceptions so callers never
have to depend on backend-specific failures (numpy allocation errors and the
like).
"""

from __future__ import annotations


class Blake2Error(Exception):
    """Base error for BLAKE2b engine operations."""


class InvalidConfigurationError(Blake2Error, ValueError):
    """Raised when key, salt or digest length parameters are out of range."""


class TransientFailureError(Blake2Error):
    """Raised when secure memory cannot be allocated."""


class EngineStateError(Blake2Error):
    """Raised when an engine is used after disposal or after a failed update."""


class SecureMemoryError(Blake2Error):
    """Raised for out-of-range or use-after-release secure buffer access."""
