"""Fixed-location byte storage for key material and block buffers.

Python ``bytes`` objects are immutable and ``bytearray`` objects may be
reallocated when resized, so neither can be reliably wiped. A
:class:`SecureBuffer` is backed by a fixed-size numpy ``uint8`` array that is
never resized: every write lands in the same allocation, and :meth:`wipe`
zeroes that allocation in place.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import numpy as np

from .errors import SecureMemoryError, TransientFailureError


class SecureBuffer:
    """A fixed-size, explicitly wiped byte buffer."""

    __slots__ = ("_data", "_released")

    def __init__(self, length: int) -> None:
        if length < 0:
            raise ValueError("length must be non-negative")
        try:
            self._data = np.zeros(length, dtype=np.uint8)
        except MemoryError as e:
            raise TransientFailureError(f"unable to allocate {length} secure bytes") from e
        self._released = False

    @classmethod
    def from_bytes(cls, data) -> "SecureBuffer":
        """Allocate a buffer holding a copy of ``data``."""

        buf = cls(len(data))
        buf.write(0, data)
        return buf

    @classmethod
    @contextmanager
    def scoped(cls, length: int) -> Iterator["SecureBuffer"]:
        """Allocate a buffer that is wiped and released on every exit path."""

        buf = cls(length)
        try:
            yield buf
        finally:
            buf.release()

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, index: int) -> int:
        self._check_live()
        if not -len(self._data) <= index < len(self._data):
            raise SecureMemoryError("secure buffer index out of range")
        return int(self._data[index])

    def __setitem__(self, index: int, value: int) -> None:
        self._check_live()
        if not -len(self._data) <= index < len(self._data):
            raise SecureMemoryError("secure buffer index out of range")
        if not 0 <= value <= 0xFF:
            raise ValueError("byte value must be in range 0..255")
        self._data[index] = value

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"SecureBuffer(length={len(self._data)}, {state})"

    @property
    def released(self) -> bool:
        return self._released

    def write(self, offset: int, data) -> None:
        """Copy ``data`` into the buffer starting at ``offset``."""

        self._check_live()
        view = data.view() if isinstance(data, SecureBuffer) else memoryview(data).cast("B")
        end = offset + len(view)
        if offset < 0 or end > len(self._data):
            raise SecureMemoryError("write past end of secure buffer")
        if len(view):
            self._data[offset:end] = np.frombuffer(view, dtype=np.uint8)

    def read(self, offset: int = 0, length: int | None = None) -> bytes:
        """Return a ``bytes`` copy of a range.

        The copy is an ordinary immutable object and cannot be wiped; prefer
        :meth:`view` for secret contents.
        """

        self._check_live()
        if length is None:
            length = len(self._data) - offset
        if offset < 0 or length < 0 or offset + length > len(self._data):
            raise SecureMemoryError("read past end of secure buffer")
        return self._data[offset : offset + length].tobytes()

    def view(self) -> memoryview:
        """Return a writable memoryview over the underlying storage."""

        self._check_live()
        return memoryview(self._data)

    def wipe(self) -> None:
        """Zero every byte in place."""

        self._data.fill(0)

    def is_wiped(self) -> bool:
        """Whether every byte is zero. Valid after :meth:`release`."""

        return not self._data.any()

    def release(self) -> None:
        """Wipe the contents and refuse further access. Idempotent."""

        self._data.fill(0)
        self._released = True

    def _check_live(self) -> None:
        if self._released:
            raise SecureMemoryError("secure buffer has been released")
