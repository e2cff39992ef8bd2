"""BLAKE2b compression function.

The functions here operate on plain Python integers masked to 64 bits. The
engine in :mod:`blake2mac.engine` owns the chain value and the 16-word scratch
state and passes them in; nothing in this module keeps state between calls.
"""

from __future__ import annotations

import struct
from typing import MutableSequence, Sequence

from .constants import (
    BLOCK_BYTES,
    IV,
    MASK64,
    PARAM_FANOUT_DEPTH,
    ROUNDS,
    SALT_BYTES,
    SIGMA,
    WORD_BITS,
    WORD_BYTES,
)

_BLOCK_WORDS = struct.Struct("<16Q")
_SALT_WORDS = struct.Struct("<2Q")


def rotr64(x: int, n: int) -> int:
    """Rotate the 64-bit word ``x`` right by ``n`` bits."""

    return ((x >> n) | (x << (WORD_BITS - n))) & MASK64


def mix(v: MutableSequence[int], a: int, b: int, c: int, d: int, x: int, y: int) -> None:
    """The G function: mix two message words into state words ``a, b, c, d``."""

    va = (v[a] + v[b] + x) & MASK64
    vd = rotr64(v[d] ^ va, 32)
    vc = (v[c] + vd) & MASK64
    vb = rotr64(v[b] ^ vc, 24)
    va = (va + vb + y) & MASK64
    vd = rotr64(vd ^ va, 16)
    vc = (vc + vd) & MASK64
    vb = rotr64(vb ^ vc, 63)
    v[a] = va
    v[b] = vb
    v[c] = vc
    v[d] = vd


def round_fn(v: MutableSequence[int], m: Sequence[int], s: Sequence[int]) -> None:
    # Mix the columns.
    mix(v, 0, 4, 8, 12, m[s[0]], m[s[1]])
    mix(v, 1, 5, 9, 13, m[s[2]], m[s[3]])
    mix(v, 2, 6, 10, 14, m[s[4]], m[s[5]])
    mix(v, 3, 7, 11, 15, m[s[6]], m[s[7]])
    # Mix the diagonals.
    mix(v, 0, 5, 10, 15, m[s[8]], m[s[9]])
    mix(v, 1, 6, 11, 12, m[s[10]], m[s[11]])
    mix(v, 2, 7, 8, 13, m[s[12]], m[s[13]])
    mix(v, 3, 4, 9, 14, m[s[14]], m[s[15]])


def words_from_block(block, offset: int = 0) -> tuple[int, ...]:
    """Decode 128 bytes at ``offset`` into 16 little-endian 64-bit words."""

    return _BLOCK_WORDS.unpack_from(block, offset)


def compress(
    h: MutableSequence[int],
    v: MutableSequence[int],
    block,
    offset: int,
    t0: int,
    t1: int,
    f0: int,
) -> None:
    """Compress one block into the chain value ``h`` in place.

    Args:
        h: 8-word chain value, updated in place.
        v: 16-word scratch state. Overwritten; the caller wipes it.
        block: Any buffer-protocol object holding at least ``offset + 128``
            bytes.
        offset: Start of the block within ``block``.
        t0: Low word of the byte counter.
        t1: High word of the byte counter.
        f0: Finalization flag, 0 or all-ones.
    """

    if len(block) - offset < BLOCK_BYTES:
        raise ValueError("compress needs a full 128-byte block")

    m = words_from_block(block, offset)

    v[0:8] = h
    v[8:12] = IV[0:4]
    v[12] = t0 ^ IV[4]
    v[13] = t1 ^ IV[5]
    v[14] = f0 ^ IV[6]
    v[15] = IV[7]

    for r in range(ROUNDS):
        round_fn(v, m, SIGMA[r])

    for i in range(8):
        h[i] ^= v[i] ^ v[i + 8]


def initial_chain_value(digest_length: int, key_length: int, salt=None) -> list[int]:
    """Derive the chain value for a fresh message.

    Word 0 carries the parameter block (digest length, key length, fanout and
    depth of 1). A 16-byte salt is folded into words 4 and 5.
    """

    h = list(IV)
    h[0] ^= digest_length | (key_length << 8) | PARAM_FANOUT_DEPTH
    if salt is not None:
        if len(salt) != SALT_BYTES:
            raise ValueError("salt must be exactly 16 bytes")
        s0, s1 = _SALT_WORDS.unpack_from(salt, 0)
        h[4] ^= s0
        h[5] ^= s1
    return h


def write_digest(h: Sequence[int], digest_length: int, out, offset: int = 0) -> None:
    """Serialize the first ``digest_length`` bytes of ``h`` little-endian into ``out``.

    Words past ``digest_length`` are never touched; the last word written may
    be truncated.
    """

    for i, word in enumerate(h):
        start = i * WORD_BYTES
        if start >= digest_length:
            break
        take = min(WORD_BYTES, digest_length - start)
        out[offset + start : offset + start + take] = word.to_bytes(WORD_BYTES, "little")[:take]
