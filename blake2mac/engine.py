"""Incremental BLAKE2b hash and MAC engine.

:class:`Blake2bMac` absorbs input in arbitrary chunks and emits a digest of
1..64 bytes. It optionally takes a key of up to 64 bytes (MAC mode) and a
16-byte salt.

Every piece of mutable session state lives in a single :class:`EngineState`
record owned by the engine, so :meth:`Blake2bMac.reset` and
:meth:`Blake2bMac.dispose` are single-point operations. The block buffer, key
and salt are held in :class:`~blake2mac.secure_memory.SecureBuffer` storage and
are zeroed whenever they are no longer needed, including when an operation
raises.

The engine is not thread-safe; callers sharing one across threads must
serialize access themselves.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Final, Iterator

from . import core
from .config import MacConfig, validate_parameters
from .constants import BLOCK_BYTES, LAST_BLOCK_FLAG, MASK64, MAX_DIGEST_BYTES
from .errors import EngineStateError, InvalidConfigurationError
from .secure_memory import SecureBuffer

_LOGGER: Final = logging.getLogger(__name__)

_ZERO_SCRATCH: Final = (0,) * 16


def _as_view(data) -> memoryview:
    if isinstance(data, SecureBuffer):
        return data.view()
    return memoryview(data).cast("B")


@dataclass(slots=True)
class EngineState:
    """Mutable state for one hash/MAC session.

    Attributes:
        buffer: 128-byte block buffer holding at most one uncompressed block.
        chain_value: 8-word running hash state; ``None`` only while being
            re-derived.
        scratch: 16-word working state rebuilt by every compression.
        t0: Low word of the absorbed byte counter.
        t1: High word of the absorbed byte counter.
        f0: Finalization flag, all-ones only during the final compression.
        buffer_pos: Number of valid bytes in ``buffer`` (0..128).
        failed: Set when an update raised; cleared by reset.
    """

    buffer: SecureBuffer
    chain_value: list[int] | None = None
    scratch: list[int] = field(default_factory=lambda: list(_ZERO_SCRATCH))
    t0: int = 0
    t1: int = 0
    f0: int = 0
    buffer_pos: int = 0
    failed: bool = False

    def add_to_counter(self, n: int) -> None:
        """Advance the 128-bit byte counter by ``n``."""

        self.t0 = (self.t0 + n) & MASK64
        if self.t0 < n:
            self.t1 = (self.t1 + 1) & MASK64

    def compress(self, block, offset: int = 0) -> None:
        core.compress(self.chain_value, self.scratch, block, offset, self.t0, self.t1, self.f0)

    def flush_buffer(self) -> None:
        """Compress a full, non-final buffer and empty it."""

        self.add_to_counter(BLOCK_BYTES)
        self.compress(self.buffer.view())
        self.buffer.wipe()
        self.buffer_pos = 0

    def clear_scratch(self) -> None:
        self.scratch[:] = _ZERO_SCRATCH

    def wipe(self) -> None:
        """Zero everything: buffer, scratch, chain value, counters and flags."""

        self.buffer.wipe()
        self.buffer_pos = 0
        self.clear_scratch()
        if self.chain_value is not None:
            self.chain_value[:] = (0,) * len(self.chain_value)
        self.chain_value = None
        self.t0 = 0
        self.t1 = 0
        self.f0 = 0
        self.failed = False


class Blake2bMac:
    """Streaming BLAKE2b with optional key and salt.

    Args:
        key: Optional key of at most 64 bytes. A bytes-like key is copied into
            engine-owned secure memory. A :class:`SecureBuffer` key is taken
            over as-is and released when the engine is disposed. An empty key
            is the same as no key; an empty :class:`SecureBuffer` is left
            untouched.
        salt: Optional salt of exactly 16 bytes.
        digest_length: Output size in bytes, 1..64.

    Raises:
        InvalidConfigurationError: If any parameter is out of range. Nothing is
            allocated in that case.
    """

    name = "blake2b"

    def __init__(self, key=None, salt=None, digest_length: int = MAX_DIGEST_BYTES) -> None:
        self._digest_length = digest_length
        self._key_length = 0
        self._key: SecureBuffer | None = None
        self._salt: SecureBuffer | None = None
        self._disposed = False

        key_length = 0 if key is None else len(key)
        errors = validate_parameters(digest_length, key_length, None if salt is None else len(salt))
        if errors:
            raise InvalidConfigurationError("; ".join(errors))
        self._key_length = key_length

        try:
            if isinstance(key, SecureBuffer) and key_length:
                self._key = key
            elif key_length:
                self._key = SecureBuffer.from_bytes(key)
            if salt is not None:
                self._salt = SecureBuffer.from_bytes(salt)
            self._state = EngineState(buffer=SecureBuffer(BLOCK_BYTES))
        except BaseException:
            if self._key is not None:
                self._key.release()
            if self._salt is not None:
                self._salt.release()
            raise

        self._load_initial_state()
        _LOGGER.debug(
            "blake2b engine created: digest_length=%d keyed=%s salted=%s",
            digest_length,
            self.keyed,
            self.salted,
        )

    @classmethod
    def from_config(cls, config: MacConfig) -> Blake2bMac:
        """Build an engine from a :class:`~blake2mac.config.MacConfig`."""

        return cls(key=config.key, salt=config.salt, digest_length=config.digest_length)

    def __enter__(self) -> Blake2bMac:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return (
            f"Blake2bMac(digest_length={self._digest_length}, keyed={self.keyed}, "
            f"salted={self.salted}, disposed={self._disposed})"
        )

    @property
    def digest_size(self) -> int:
        return self._digest_length

    @property
    def keyed(self) -> bool:
        return self._key_length > 0

    @property
    def salted(self) -> bool:
        return self._salt is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def length(self) -> int:
        """Configured digest length in bytes."""

        return self._digest_length

    def block_size(self) -> int:
        return BLOCK_BYTES

    # ------------------------------------------------------------------
    # Absorbing

    def update(self, data) -> None:
        """Absorb a single byte (``int``) or a whole bytes-like object."""

        if isinstance(data, int):
            self.update_byte(data)
        else:
            self.update_block(data)

    def update_byte(self, value: int) -> None:
        """Absorb one byte."""

        self._check_usable()
        with self._fail_secure("update_byte"):
            if not 0 <= value <= 0xFF:
                raise ValueError("byte value must be in range 0..255")
            state = self._state
            if state.buffer_pos == BLOCK_BYTES:
                state.flush_buffer()
            state.buffer[state.buffer_pos] = value
            state.buffer_pos += 1

    def update_block(self, data, offset: int = 0, length: int | None = None) -> None:
        """Absorb ``length`` bytes of ``data`` starting at ``offset``.

        ``length`` defaults to the rest of ``data``. The block holding the last
        absorbed byte is always left in the buffer, since only
        :meth:`finalize` knows whether it is the final block.
        """

        self._check_usable()
        with self._fail_secure("update_block"):
            view = _as_view(data)
            if length is None:
                length = len(view) - offset
            if offset < 0 or length < 0 or offset + length > len(view):
                raise ValueError("offset and length must lie within data")
            if length == 0:
                return

            state = self._state
            pos = offset
            end = offset + length

            if state.buffer_pos:
                room = BLOCK_BYTES - state.buffer_pos
                if length <= room:
                    state.buffer.write(state.buffer_pos, view[pos:end])
                    state.buffer_pos += length
                    return
                state.buffer.write(state.buffer_pos, view[pos : pos + room])
                state.flush_buffer()
                pos += room

            # Compress straight from the input while more than one block
            # remains; the last (possibly full) block goes to the buffer.
            while end - pos > BLOCK_BYTES:
                state.add_to_counter(BLOCK_BYTES)
                state.compress(view, pos)
                pos += BLOCK_BYTES

            state.buffer.write(0, view[pos:end])
            state.buffer_pos = end - pos

    # ------------------------------------------------------------------
    # Finalization

    def finalize(self, output, offset: int = 0) -> int:
        """Write the digest into ``output[offset:offset + digest_length]``.

        The engine is reset afterwards, ready for a new message with the same
        key, salt and digest length. The reset also runs when this raises.

        Returns:
            Number of bytes written.
        """

        self._check_usable()
        state = self._state
        try:
            out = _as_view(output)
            if out.readonly:
                raise TypeError("output buffer must be writable")
            if offset < 0 or offset + self._digest_length > len(out):
                raise ValueError(f"output needs {self._digest_length} bytes at offset {offset}")

            state.f0 = LAST_BLOCK_FLAG
            state.add_to_counter(state.buffer_pos)
            state.compress(state.buffer.view())
            state.buffer.wipe()
            state.clear_scratch()

            core.write_digest(state.chain_value, self._digest_length, out, offset)
            return self._digest_length
        except BaseException:
            state.buffer.wipe()
            _LOGGER.warning("finalize failed; block buffer wiped")
            raise
        finally:
            self._reset()

    def digest(self) -> bytes:
        """Finalize and return the digest as ``bytes``."""

        with SecureBuffer.scoped(self._digest_length) as out:
            self.finalize(out)
            return out.read()

    def hexdigest(self) -> str:
        return self.digest().hex()

    # ------------------------------------------------------------------
    # Lifecycle

    def reset(self) -> None:
        """Discard absorbed input and return to the post-construction state.

        Also clears the failure guard set by a raising update.
        """

        if self._disposed:
            raise EngineStateError("engine has been disposed")
        self._reset()
        _LOGGER.debug("blake2b engine reset")

    def dispose(self) -> None:
        """Wipe and release the key, salt and all session state. Idempotent."""

        if self._disposed:
            return
        try:
            self._state.wipe()
        finally:
            self._state.buffer.release()
            if self._salt is not None:
                self._salt.release()
            if self._key is not None:
                self._key.release()
            self._disposed = True
            _LOGGER.debug("blake2b engine disposed")

    # ------------------------------------------------------------------
    # Internals

    def _load_initial_state(self) -> None:
        state = self._state
        if self._key is not None:
            # The zero-padded key is absorbed as the first block.
            state.buffer.write(0, self._key.view())
            state.buffer_pos = BLOCK_BYTES
        salt = None if self._salt is None else self._salt.view()
        state.chain_value = core.initial_chain_value(self._digest_length, self._key_length, salt)

    def _reset(self) -> None:
        with self._fail_secure("reset"):
            self._state.wipe()
            self._load_initial_state()

    def _check_usable(self) -> None:
        if self._disposed:
            raise EngineStateError("engine has been disposed")
        if self._state.failed:
            raise EngineStateError("a previous update failed; call reset() before reuse")

    @contextmanager
    def _fail_secure(self, operation: str) -> Iterator[None]:
        try:
            yield
        except BaseException:
            self._state.buffer.wipe()
            self._state.buffer_pos = 0
            self._state.failed = True
            _LOGGER.warning("%s failed; block buffer wiped, reset() required", operation)
            raise
