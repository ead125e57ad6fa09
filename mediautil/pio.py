"""Fixed-width integer packing and slicing of lists of byte pieces."""

from __future__ import annotations

from collections.abc import Sequence

RECOMMEND_BUFIO_SIZE = 64 * 1024


def _take(data: bytes, size: int) -> bytes:
    if len(data) < size:
        raise ValueError(f"need {size} bytes, got {len(data)}")
    return bytes(data[:size])


def _unsigned(data: bytes, size: int, order: str = "big") -> int:
    return int.from_bytes(_take(data, size), order)


def _signed(data: bytes, size: int) -> int:
    return int.from_bytes(_take(data, size), "big", signed=True)


def _pack(value: int, size: int, order: str = "big") -> bytes:
    return (value & ((1 << (size * 8)) - 1)).to_bytes(size, order)


def u8(data: bytes) -> int:
    return _unsigned(data, 1)


def u16be(data: bytes) -> int:
    return _unsigned(data, 2)


def i16be(data: bytes) -> int:
    return _signed(data, 2)


def i24be(data: bytes) -> int:
    return _signed(data, 3)


def u24be(data: bytes) -> int:
    return _unsigned(data, 3)


def i32be(data: bytes) -> int:
    return _signed(data, 4)


def u32le(data: bytes) -> int:
    return _unsigned(data, 4, "little")


def u32be(data: bytes) -> int:
    return _unsigned(data, 4)


def u40be(data: bytes) -> int:
    return _unsigned(data, 5)


def u64be(data: bytes) -> int:
    return _unsigned(data, 8)


def i64be(data: bytes) -> int:
    return _signed(data, 8)


def put_u8(value: int) -> bytes:
    return _pack(value, 1)


def put_i16be(value: int) -> bytes:
    return _pack(value, 2)


def put_u16be(value: int) -> bytes:
    return _pack(value, 2)


def put_i24be(value: int) -> bytes:
    return _pack(value, 3)


def put_u24be(value: int) -> bytes:
    return _pack(value, 3)


def put_i32be(value: int) -> bytes:
    return _pack(value, 4)


def put_u32be(value: int) -> bytes:
    return _pack(value, 4)


def put_u32le(value: int) -> bytes:
    return _pack(value, 4, "little")


def put_u40be(value: int) -> bytes:
    return _pack(value, 5)


def put_u48be(value: int) -> bytes:
    return _pack(value, 6)


def put_u64be(value: int) -> bytes:
    return _pack(value, 8)


def put_i64be(value: int) -> bytes:
    return _pack(value, 8)


def vec_len(vec: Sequence[bytes]) -> int:
    """Total number of bytes across the pieces."""
    return sum(len(piece) for piece in vec)


def vec_slice(vec: Sequence[bytes], start: int, end: int) -> list[bytes]:
    """Bytes ``start`` to ``end`` of the concatenated pieces, kept as pieces.

    A negative ``end`` means up to the end. Raises ValueError if the range
    is reversed or runs past the data.
    """
    start = max(start, 0)
    if 0 <= end < start:
        raise ValueError("pio: VecSlice start > end")

    index = 0
    offset = 0
    while start > 0 and index < len(vec):
        left = len(vec[index])
        step = min(start, left)
        left -= step
        offset += step
        start -= step
        end -= step
        if left == 0:
            index += 1
            offset = 0
    if start > 0:
        raise ValueError("pio: VecSlice start out of range")

    out: list[bytes] = []
    while end != 0 and index < len(vec):
        piece = vec[index]
        left = len(piece) - offset
        step = left
        if 0 < end < step:
            step = end
        out.append(bytes(piece[offset:offset + step]))
        left -= step
        end -= step
        offset += step
        if left == 0:
            index += 1
            offset = 0
    if end > 0:
        raise ValueError("pio: VecSlice end out of range")
    return out