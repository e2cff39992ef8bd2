"""One-shot digest helpers built on :class:`~blake2mac.engine.Blake2bMac`."""

from __future__ import annotations

import hmac

from .constants import MAX_DIGEST_BYTES
from .engine import Blake2bMac


def blake2b_digest(
    data: bytes,
    *,
    digest_size: int = 64,
    key: bytes | None = None,
    salt: bytes | None = None,
) -> bytes:
    """Compute a BLAKE2b digest in one call.

    Args:
        data: Data to hash.
        digest_size: Output size (1..64).
        key: Optional key for keyed BLAKE2b (MAC usage).
        salt: Optional 16-byte salt.

    Returns:
        Digest bytes.
    """

    with Blake2bMac(key=key, salt=salt, digest_length=digest_size) as mac:
        mac.update_block(data)
        return mac.digest()


def blake2b_hexdigest(
    data: bytes,
    *,
    digest_size: int = 64,
    key: bytes | None = None,
    salt: bytes | None = None,
) -> str:
    """Like :func:`blake2b_digest`, hex encoded."""

    return blake2b_digest(data, digest_size=digest_size, key=key, salt=salt).hex()


def verify_mac(
    tag: bytes,
    data: bytes,
    *,
    key: bytes,
    salt: bytes | None = None,
    digest_size: int = MAX_DIGEST_BYTES,
) -> bool:
    """Check ``tag`` against the keyed BLAKE2b of ``data`` in constant time.

    The expected length is ``digest_size``, never the length of ``tag``; a
    tag of any other length is rejected.
    """

    expected = blake2b_digest(data, digest_size=digest_size, key=key, salt=salt)
    return hmac.compare_digest(expected, tag)
