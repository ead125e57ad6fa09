import math

import pytest

from mediautil.buffer import (
    Buffer,
    LimitBuffer,
    concat_buffers,
    size_of_buffers,
    split_buffers,
)


def test_write_to_empty_buffer():
    b = Buffer()
    assert len(b) == 0
    assert b.write(bytes([1, 2, 3])) == 3
    assert bytes(b) == b"\x01\x02\x03"


@pytest.mark.parametrize(
    "writer, reader, value",
    [
        ("write_uint16", "read_uint16", 0xBEEF),
        ("write_uint24", "read_uint24", 0xABCDEF),
        ("write_uint32", "read_uint32", 0xDEADBEEF),
        ("write_byte", "read_byte", 0x7F),
    ],
)
def test_integer_round_trip(writer, reader, value):
    b = Buffer()
    getattr(b, writer)(value)
    assert getattr(b, reader)() == value
    assert len(b) == 0


def test_uint16_is_big_endian():
    b = Buffer()
    b.write_uint16(0x1234)
    assert bytes(b) == b"\x12\x34"


def test_float64_round_trip():
    b = Buffer()
    b.write_float64(math.pi)
    assert len(b) == 8
    assert b.read_float64() == math.pi


def test_uint64_read():
    b = Buffer(bytes(range(1, 9)))
    assert b.read_uint64() == int.from_bytes(bytes(range(1, 9)), "big")


def test_write_truncates_to_width():
    b = Buffer()
    b.write_uint16(0x12345)
    assert b.read_uint16() == 0x2345


def test_write_string():
    b = Buffer()
    b.write_string("abc")
    b.write_string(b"de")
    assert bytes(b) == b"abcde"


def test_read_n_consumes():
    b = Buffer(b"hello world")
    assert b.read_n(5) == b"hello"
    assert bytes(b) == b" world"
    assert len(b) == 6


def test_read_n_past_end_raises():
    b = Buffer(b"ab")
    with pytest.raises(EOFError):
        b.read_n(3)
    assert bytes(b) == b"ab"


def test_read_byte_on_empty_raises():
    with pytest.raises(EOFError):
        Buffer().read_byte()


def test_read_short():
    b = Buffer(b"abc")
    assert b.read(10) == b"abc"
    assert b.read(1) == b""


def test_can_read():
    b = Buffer(b"xy")
    assert b.can_read()
    assert b.can_read_n(2)
    assert not b.can_read_n(3)
    b.read_n(2)
    assert not b.can_read()


def test_malloc_returns_writable_region():
    b = Buffer(b"\x09")
    view = b.malloc(2)
    view[0] = 1
    view[1] = 2
    del view
    assert bytes(b) == b"\x09\x01\x02"


def test_reset():
    b = Buffer(b"abc")
    b.reset()
    assert len(b) == 0
    b.write(b"z")
    assert bytes(b) == b"z"


def test_clone_is_independent():
    b = Buffer(b"abc")
    c = b.clone()
    b.read_n(1)
    c.write(b"d")
    assert bytes(b) == b"bc"
    assert bytes(c) == b"abcd"


def test_split_keeps_content():
    b = Buffer(b"abcdefg")
    assert b.split(3) == [b"abc", b"def", b"g"]
    assert bytes(b) == b"abcdefg"


def test_split_exact_multiple_ends_with_empty_piece():
    assert Buffer(b"abcdef").split(3) == [b"abc", b"def", b""]


def test_split_rejects_zero():
    with pytest.raises(ValueError):
        Buffer(b"a").split(0)


def test_limit_buffer_write_within_capacity():
    b = LimitBuffer(4)
    assert b.write(b"abcd") == 4
    assert bytes(b) == b"abcd"


def test_limit_buffer_write_overflow():
    b = LimitBuffer(4, b"abc")
    with pytest.raises(ValueError):
        b.write(b"de")
    assert bytes(b) == b"abc"


def test_limit_buffer_malloc_overflow():
    b = LimitBuffer(2)
    with pytest.raises(ValueError):
        b.malloc(3)
    assert len(b) == 0


def test_limit_buffer_integer_writes_checked():
    b = LimitBuffer(3)
    with pytest.raises(ValueError):
        b.write_uint32(1)


def test_limit_buffer_initial_data_too_long():
    with pytest.raises(ValueError):
        LimitBuffer(1, b"ab")


def test_concat_and_size():
    pieces = [b"ab", b"", b"cde"]
    assert concat_buffers(pieces) == b"abcde"
    assert size_of_buffers(pieces) == 5


def test_split_buffers():
    result = split_buffers([b"abc", b"defgh"], 4)
    assert result == [[b"abc", b"d"], [b"efgh"]]


def test_split_buffers_fits_in_one():
    assert split_buffers([b"ab", b"c"], 8) == [[b"ab", b"c"]]


def test_split_buffers_preserves_content():
    pieces = [b"a" * 7, b"b" * 3, b"c" * 11]
    chunks = split_buffers(pieces, 5)
    assert b"".join(b"".join(c) for c in chunks) == b"".join(pieces)
    assert all(size_of_buffers(c) == 5 for c in chunks[:-1])
    assert size_of_buffers(chunks[-1]) <= 5


def test_split_buffers_rejects_zero_size():
    with pytest.raises(ValueError):
        split_buffers([b"a"], 0)