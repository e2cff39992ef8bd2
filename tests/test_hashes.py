from __future__ import annotations

import hashlib

import pytest

from blake2mac import (
    InvalidConfigurationError,
    blake2b_digest,
    blake2b_hexdigest,
    generate_key,
    generate_salt,
    random_bytes,
    verify_mac,
)


def test_digest_and_hexdigest_smoke() -> None:
    d = blake2b_digest(b"abc", digest_size=32)
    assert len(d) == 32
    assert blake2b_hexdigest(b"abc", digest_size=32) == d.hex()


def test_digest_rejects_bad_size() -> None:
    with pytest.raises(InvalidConfigurationError):
        blake2b_digest(b"abc", digest_size=0)


def test_verify_mac_accepts_and_rejects(caw_key: bytes, caw_message: bytes) -> None:
    tag = hashlib.blake2b(caw_message, key=caw_key, digest_size=16).digest()
    assert verify_mac(tag, caw_message, key=caw_key, digest_size=16)

    tampered = bytearray(tag)
    tampered[-1] ^= 0x01
    assert not verify_mac(bytes(tampered), caw_message, key=caw_key, digest_size=16)
    assert not verify_mac(tag, caw_message + b"!", key=caw_key, digest_size=16)


def test_verify_mac_length_is_fixed_by_verifier(caw_key: bytes, caw_message: bytes) -> None:
    full = hashlib.blake2b(caw_message, key=caw_key).digest()
    assert verify_mac(full, caw_message, key=caw_key)

    # A truncated tag must not shrink the comparison.
    assert not verify_mac(full[:1], caw_message, key=caw_key)
    assert not verify_mac(full[:16], caw_message, key=caw_key)
    assert sum(verify_mac(bytes([g]), b"forged", key=caw_key) for g in range(256)) == 0


@pytest.mark.parametrize("tag", [b"", bytes(65)])
def test_verify_mac_rejects_out_of_range_tag_lengths(tag: bytes, caw_key: bytes) -> None:
    assert verify_mac(tag, b"x", key=caw_key) is False


def test_verify_mac_with_salt(full_key: bytes, salt: bytes) -> None:
    tag = blake2b_digest(b"payload", key=full_key, salt=salt)
    assert verify_mac(tag, b"payload", key=full_key, salt=salt)
    assert not verify_mac(tag, b"payload", key=full_key)


def test_random_key_and_salt() -> None:
    key = generate_key()
    assert len(key) == 64
    assert len(generate_key(16)) == 16
    assert len(generate_salt()) == 16
    assert random_bytes(0) == b""
    assert generate_key() != key


@pytest.mark.parametrize("length", [0, 65])
def test_generate_key_bounds(length: int) -> None:
    with pytest.raises(ValueError):
        generate_key(length)


def test_random_bytes_negative() -> None:
    with pytest.raises(ValueError):
        random_bytes(-1)
