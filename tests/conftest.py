"""Test configuration for blake2mac package."""

import pytest


def _make_test_input(length):
    return bytes(i % 251 for i in range(length))


@pytest.fixture
def make_test_input():
    """Provide a deterministic input generator: 0, 1, ..., 250, 0, 1, ..."""
    return _make_test_input


@pytest.fixture
def caw_key():
    """Provide the 7-byte sample key ("caw caw")."""
    return bytes([0x63, 0x61, 0x77, 0x20, 0x63, 0x61, 0x77])


@pytest.fixture
def caw_message():
    """Provide the 11-byte sample message ("caw caw caw")."""
    return bytes([0x63, 0x61, 0x77, 0x20, 0x63, 0x61, 0x77, 0x20, 0x63, 0x61, 0x77])


@pytest.fixture
def full_key():
    """Provide the 64-byte key 0x00..0x3f used by the published keyed vectors."""
    return bytes(range(64))


@pytest.fixture
def salt():
    """Provide a fixed 16-byte salt."""
    return bytes(range(0xA0, 0xB0))
