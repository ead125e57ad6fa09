"""Growable byte buffers with big-endian read and write helpers."""

from __future__ import annotations

import struct
from collections.abc import Iterable, Sequence


class Buffer:
    """Bytes consumed from the front and appended at the back.

    Integers are read and written in big-endian order.
    """

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes | bytearray | memoryview = b"") -> None:
        self._data = bytearray(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data) - self._pos

    def __bytes__(self) -> bytes:
        return bytes(self._data[self._pos:])

    def __repr__(self) -> str:
        return f"{type(self).__name__}({bytes(self)!r})"

    def _ensure_room(self, count: int) -> None:
        """Hook for subclasses that limit how much the buffer may hold."""

    def _append(self, data: bytes | bytearray | memoryview) -> None:
        self._ensure_room(len(data))
        self._data += data

    def read_n(self, n: int) -> bytes:
        """Consume and return exactly ``n`` bytes."""
        if n < 0:
            raise ValueError(f"cannot read a negative number of bytes: {n}")
        if n > len(self):
            raise EOFError(f"need {n} bytes, only {len(self)} available")
        start = self._pos
        result = bytes(self._data[start:start + n])
        self._pos += n
        if self._pos == len(self._data):
            self._data = bytearray()
            self._pos = 0
        return result

    def read(self, size: int | None = -1) -> bytes:
        """Consume up to ``size`` bytes; all that is left if ``size`` is negative."""
        if size is None or size < 0 or size > len(self):
            size = len(self)
        return self.read_n(size)

    def read_float64(self) -> float:
        return struct.unpack(">d", self.read_n(8))[0]

    def read_uint64(self) -> int:
        return int.from_bytes(self.read_n(8), "big")

    def read_uint32(self) -> int:
        return int.from_bytes(self.read_n(4), "big")

    def read_uint24(self) -> int:
        return int.from_bytes(self.read_n(3), "big")

    def read_uint16(self) -> int:
        return int.from_bytes(self.read_n(2), "big")

    def read_byte(self) -> int:
        return self.read_n(1)[0]

    def write_float64(self, value: float) -> None:
        self._append(struct.pack(">d", value))

    def write_uint32(self, value: int) -> None:
        self._append((value & 0xFFFFFFFF).to_bytes(4, "big"))

    def write_uint24(self, value: int) -> None:
        self._append((value & 0xFFFFFF).to_bytes(3, "big"))

    def write_uint16(self, value: int) -> None:
        self._append((value & 0xFFFF).to_bytes(2, "big"))

    def write_byte(self, value: int) -> None:
        self._append(bytes((value & 0xFF,)))

    def write_string(self, text: str | bytes) -> None:
        """Append a string as UTF-8 (bytes are appended as they are)."""
        self._append(text.encode("utf-8") if isinstance(text, str) else text)

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Append ``data`` and return how many bytes were written."""
        self._append(data)
        return len(data)

    def malloc(self, count: int) -> memoryview:
        """Grow the buffer by ``count`` zero bytes and return a writable view of them.

        Release the view before the buffer is written to again.
        """
        if count < 0:
            raise ValueError(f"cannot allocate a negative number of bytes: {count}")
        self._ensure_room(count)
        start = len(self._data)
        self._data.extend(bytes(count))
        return memoryview(self._data)[start:]

    def reset(self) -> None:
        """Drop all content."""
        self._data = bytearray()
        self._pos = 0

    def clone(self) -> Buffer:
        """Return an independent copy of the unread content."""
        return Buffer(bytes(self))

    def can_read(self) -> bool:
        return self.can_read_n(1)

    def can_read_n(self, n: int) -> bool:
        return len(self) >= n

    def split(self, n: int) -> list[bytes]:
        """Cut the unread content into pieces of ``n`` bytes without consuming it.

        The last piece holds the remainder and may be empty.
        """
        if n <= 0:
            raise ValueError(f"piece size must be positive: {n}")
        data = bytes(self)
        full = len(data) - len(data) % n
        pieces = [data[offset:offset + n] for offset in range(0, full, n)]
        pieces.append(data[full:])
        return pieces


class LimitBuffer(Buffer):
    """A buffer that never holds more than ``capacity`` unread bytes."""

    __slots__ = ("capacity",)

    def __init__(self, capacity: int, data: bytes | bytearray | memoryview = b"") -> None:
        if capacity < 0:
            raise ValueError(f"capacity must not be negative: {capacity}")
        if len(data) > capacity:
            raise ValueError(f"LimitBuffer Write {len(data)} > {capacity}")
        super().__init__(data)
        self.capacity = capacity

    def _ensure_room(self, count: int) -> None:
        needed = len(self) + count
        if needed > self.capacity:
            raise ValueError(f"LimitBuffer Write {needed} > {self.capacity}")

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Append ``data``; raise ValueError if it would exceed the capacity."""
        return super().write(data)

    def malloc(self, count: int) -> memoryview:
        """Grow by ``count`` bytes; raise ValueError if that exceeds the capacity."""
        return super().malloc(count)

    def clone(self) -> LimitBuffer:
        return LimitBuffer(len(self), bytes(self))


def concat_buffers(buffers: Iterable[bytes | bytearray | memoryview]) -> bytes:
    """Join fragments into one block of bytes."""
    return b"".join(bytes(piece) for piece in buffers)


def size_of_buffers(buffers: Iterable[Sequence[int]]) -> int:
    """Total length of all fragments."""
    return sum(len(piece) for piece in buffers)


def split_buffers(buffers: Iterable[bytes], size: int) -> list[list[bytes]]:
    """Regroup fragments into chunks of ``size`` bytes each; the last may be shorter.

    Fragments that straddle a chunk boundary are cut in two.
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive: {size}")
    chunks: list[list[bytes]] = []
    current: list[bytes] = []
    filled = 0
    for piece in buffers:
        while piece:
            take = min(size - filled, len(piece))
            current.append(piece[:take])
            piece = piece[take:]
            filled += take
            if filled == size:
                chunks.append(current)
                current = []
                filled = 0
    if current:
        chunks.append(current)
    return chunks