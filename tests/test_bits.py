import io

import pytest

from mediautil.bits import BitReader, BitWriter, GolombBitReader


def test_reader_matches_source_case():
    reader = BitReader(io.BytesIO(bytes([0xF3, 0xB3, 0x45, 0x60])))
    assert reader.read_bits(4) == 0xF
    assert reader.read_bits(4) == 0x3
    assert reader.read_bits(2) == 0x2
    assert reader.read_bits(2) == 0x3
    assert reader.read(2) == b"\x34\x56"


def test_reader_read_stops_at_end():
    reader = BitReader(io.BytesIO(bytes([0xF3, 0xB3, 0x45, 0x60])))
    reader.read_bits(12)
    assert reader.read(2) == b"\x34\x56"
    assert reader.read(1) == b""


def test_writer_matches_source_case():
    out = io.BytesIO()
    writer = BitWriter(out)
    writer.write_bits(0xF, 4)
    writer.write_bits(0x3, 4)
    writer.write_bits(0x2, 2)
    writer.write_bits(0x3, 2)
    assert writer.write(b"\x34\x56") == 2
    writer.flush_bits()
    assert out.getvalue() == bytes([0xF3, 0xB3, 0x45, 0x60])


def test_reader_raises_on_short_stream():
    reader = BitReader(io.BytesIO(b"\x01"))
    with pytest.raises(EOFError):
        reader.read_bits64(16)


def test_reader_reads_full_64_bits():
    reader = BitReader(io.BytesIO(bytes(range(1, 9))))
    assert reader.read_bits64(64) == 0x0102030405060708


def test_writer_crossing_64_bit_boundary_round_trips():
    out = io.BytesIO()
    writer = BitWriter(out)
    writer.write_bits64(0xABCDEF012345678, 60)
    writer.write_bits64(0x9C, 8)
    writer.write_bits64(0x5, 3)
    writer.flush_bits()
    reader = BitReader(io.BytesIO(out.getvalue()))
    assert reader.read_bits64(60) == 0xABCDEF012345678
    assert reader.read_bits64(8) == 0x9C
    assert reader.read_bits64(3) == 0x5
    assert len(out.getvalue()) == 9


def test_flush_pads_last_byte_with_zeros():
    out = io.BytesIO()
    writer = BitWriter(out)
    writer.write_bits(0b101, 3)
    writer.flush_bits()
    assert out.getvalue() == bytes([0b10100000])


def test_golomb_read_bits():
    reader = GolombBitReader(io.BytesIO(bytes([0b10110010])))
    assert reader.read_bit() == 1
    assert reader.read_bits(3) == 0b011
    assert reader.read_bits(4) == 0b0010


def test_golomb_unsigned_codes():
    # "1" "010" "011" then padding
    reader = GolombBitReader(io.BytesIO(bytes([0b10100110])))
    assert reader.read_exponential_golomb_code() == 0
    assert reader.read_exponential_golomb_code() == 1
    assert reader.read_exponential_golomb_code() == 2


def test_golomb_signed_codes():
    # codes 1, 2, 3, 4 -> 1, -1, 2, -2
    reader = GolombBitReader(io.BytesIO(bytes([0x4C, 0x85])))
    assert [reader.read_se() for _ in range(4)] == [1, -1, 2, -2]


def test_golomb_raises_at_end():
    reader = GolombBitReader(io.BytesIO(b""))
    with pytest.raises(EOFError):
        reader.read_bit()