"""Configuration for BLAKE2b hash and MAC engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import binascii
import os

from .constants import MAX_DIGEST_BYTES, MAX_KEY_BYTES, SALT_BYTES
from .errors import InvalidConfigurationError


def validate_parameters(digest_length: int, key_length: int, salt_length: Optional[int]) -> List[str]:
    """
    Check engine parameters against the BLAKE2b limits.

    Args:
        digest_length: Requested output size in bytes.
        key_length: Key size in bytes (0 when unkeyed).
        salt_length: Salt size in bytes, or None when no salt is used.

    Returns:
        List of validation errors. Empty if valid.
    """
    errors = []

    if not 1 <= digest_length <= MAX_DIGEST_BYTES:
        errors.append(f"digest length must be in range 1..{MAX_DIGEST_BYTES}, got {digest_length}")

    if key_length > MAX_KEY_BYTES:
        errors.append(f"keys longer than {MAX_KEY_BYTES} bytes are not supported, got {key_length}")

    if salt_length is not None and salt_length != SALT_BYTES:
        errors.append(f"salt length must be exactly {SALT_BYTES} bytes, got {salt_length}")

    return errors


@dataclass
class MacConfig:
    """Parameters fixed for the lifetime of an engine.

    Key and salt are left out of ``repr`` so configs can be logged safely.
    """

    digest_length: int = MAX_DIGEST_BYTES
    key: Optional[bytes] = field(default=None, repr=False)
    salt: Optional[bytes] = field(default=None, repr=False)

    @property
    def keyed(self) -> bool:
        return bool(self.key)

    @classmethod
    def hash512(cls) -> MacConfig:
        """Plain unkeyed BLAKE2b-512."""
        return cls()

    @classmethod
    def hash256(cls) -> MacConfig:
        """Plain unkeyed BLAKE2b-256."""
        return cls(digest_length=32)

    @classmethod
    def mac(cls, key: bytes, *, digest_length: int = MAX_DIGEST_BYTES, salt: Optional[bytes] = None) -> MacConfig:
        """Keyed BLAKE2b used as a MAC."""
        return cls(digest_length=digest_length, key=key, salt=salt)

    @classmethod
    def from_environment(cls, prefix: str = "BLAKE2MAC") -> MacConfig:
        """
        Build a configuration from environment variables.

        Reads ``<prefix>_DIGEST_LENGTH`` (decimal), ``<prefix>_KEY`` and
        ``<prefix>_SALT`` (hex). Unset variables keep their defaults.

        Raises:
            InvalidConfigurationError: If a variable cannot be parsed or the
                resulting configuration is invalid.
        """
        config = cls()

        digest_length = os.getenv(f"{prefix}_DIGEST_LENGTH")
        if digest_length is not None:
            try:
                config.digest_length = int(digest_length)
            except ValueError as e:
                raise InvalidConfigurationError(f"{prefix}_DIGEST_LENGTH is not an integer") from e

        config.key = _hex_from_environment(f"{prefix}_KEY")
        config.salt = _hex_from_environment(f"{prefix}_SALT")

        config.check()
        return config

    def validate(self) -> List[str]:
        """
        Validate current configuration.

        Returns:
            List of validation errors. Empty if valid.
        """
        return validate_parameters(
            self.digest_length,
            len(self.key) if self.key else 0,
            None if self.salt is None else len(self.salt),
        )

    def check(self) -> None:
        """Raise :class:`InvalidConfigurationError` listing every violated rule."""
        errors = self.validate()
        if errors:
            raise InvalidConfigurationError("; ".join(errors))


def _hex_from_environment(env_var: str) -> Optional[bytes]:
    value = os.getenv(env_var)
    if value is None or value == "":
        return None
    try:
        return binascii.unhexlify(value.strip())
    except (binascii.Error, ValueError) as e:
        raise InvalidConfigurationError(f"{env_var} is not valid hex") from e
