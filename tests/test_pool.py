import io

import pytest

from mediautil.linkedlist import ListItem
from mediautil.pool import BLL, BLLReader, BLLs, BytesPool

PIECES = (b"\x01\x02", b"\x03", b"\x04\x05\x06")
JOINED = b"".join(PIECES)


def make_bll(*pieces):
    bll = BLL()
    for piece in pieces:
        bll.push_value(piece)
    return bll


def test_bll_tracks_length_and_concatenates():
    bll = make_bll(*PIECES)
    assert bll.byte_length == len(JOINED)
    assert bll.to_bytes() == JOINED
    assert bll.to_buffers() == list(PIECES)


def test_bll_shift_reduces_length():
    bll = make_bll(*PIECES)
    item = bll.shift()
    assert item.value == PIECES[0]
    assert bll.byte_length == len(JOINED) - len(PIECES[0])


def test_bll_clear_and_recycle_empty():
    bll = make_bll(*PIECES)
    bll.recycle()
    assert len(bll) == 0
    assert bll.byte_length == 0
    other = make_bll(*PIECES)
    other.clear()
    assert other.to_bytes() == b""
    assert other.byte_length == 0


def test_get_byte_across_fragments():
    bll = make_bll(*PIECES)
    assert [bll.get_byte(i) for i in range(len(JOINED))] == list(JOINED)
    with pytest.raises(IndexError):
        bll.get_byte(len(JOINED))


def test_get_uint24_and_uint_n():
    bll = make_bll(*PIECES)
    assert bll.get_uint24(1) == int.from_bytes(JOINED[1:4], "big")
    assert bll.get_uint_n(2, 4) == int.from_bytes(JOINED[2:6], "big")


def test_write_to():
    bll = make_bll(*PIECES)
    out = io.BytesIO()
    assert bll.write_to(out) == len(JOINED)
    assert out.getvalue() == JOINED


def test_reader_skip():
    reader = make_bll(*PIECES).new_reader()
    reader.skip(3)
    assert reader.read_byte() == JOINED[3]
    assert reader.offset() == 1
    with pytest.raises(EOFError):
        reader.skip(10)


def test_reader_read_n_spans_fragments():
    reader = make_bll(*PIECES).new_reader()
    pieces = reader.read_n(4)
    assert b"".join(pieces) == JOINED[:4]
    assert len(pieces) == 3
    assert b"".join(reader.read_n(100)) == JOINED[4:]


def test_reader_read_be():
    reader = make_bll(*PIECES).new_reader()
    assert reader.read_be(3) == int.from_bytes(JOINED[:3], "big")


def test_leb128():
    reader = make_bll(b"\xe5\x8e", b"\x26\x05").new_reader()
    assert reader.leb128_unmarshal() == (624485, 3)
    assert reader.leb128_unmarshal() == (5, 1)
    with pytest.raises(EOFError):
        reader.leb128_unmarshal()


def test_empty_bll_reader():
    reader = BLL().new_reader()
    assert reader.can_read() is False
    with pytest.raises(EOFError):
        reader.read_byte()


def test_standalone_reader_without_chain():
    reader = BLLReader()
    assert reader.can_read() is False
    assert reader.read_n(3) == []


def test_blls_push_and_read_across_chains():
    blls = BLLs()
    blls.push_value(make_bll(*PIECES))
    blls.push_value(make_bll(b"\x07"))
    blls.push(ListItem(b"\x08\x09"))
    assert len(blls) == 2
    assert blls.byte_length == len(JOINED) + 3
    assert blls.to_bytes() == JOINED + b"\x07\x08\x09"
    assert blls.to_list() == [list(PIECES), [b"\x07", b"\x08\x09"]]
    assert blls.to_buffers() == list(PIECES) + [b"\x07", b"\x08\x09"]
    reader = blls.new_reader()
    assert bytes(reader.read_byte() for _ in range(len(JOINED) + 3)) == blls.to_bytes()
    with pytest.raises(EOFError):
        reader.read_byte()


def test_blls_push_starts_first_chain():
    blls = BLLs()
    blls.push(ListItem(b"ab"))
    blls.push(ListItem(b"c"))
    assert len(blls) == 1
    assert blls.to_bytes() == b"abc"
    assert blls.byte_length == 3


def test_blls_recycle_and_empty_reader():
    blls = BLLs()
    blls.push_value(make_bll(*PIECES))
    blls.recycle()
    assert len(blls) == 0
    assert blls.byte_length == 0
    reader = blls.new_reader()
    assert reader.can_read() is False
    with pytest.raises(EOFError):
        reader.read_byte()


def test_bytes_pool_reuses_blocks():
    pool = BytesPool()
    item = pool.get(100)
    assert len(item.value) == 100
    item.recycle()
    again = pool.get(120)
    assert again is item
    assert len(again.value) == 120


def test_bytes_pool_oversized_block_is_not_pooled():
    pool = BytesPool(4)
    item = pool.get(1000)
    assert len(item.value) == 1000
    assert item.pool is None


def test_bytes_pool_shell_is_reused_and_cleared():
    pool = BytesPool()
    shell = pool.get_shell(b"abc")
    assert shell.value == b"abc"
    shell.recycle()
    assert shell.value is None
    again = pool.get_shell(b"xyz")
    assert again is shell
    assert again.value == b"xyz"


def test_bytes_pool_rejects_negative_levels():
    with pytest.raises(ValueError):
        BytesPool(-1)