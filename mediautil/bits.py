"""Bit-level readers and writers over binary streams, including Exp-Golomb codes."""

from __future__ import annotations

from typing import BinaryIO

_MASK64 = (1 << 64) - 1


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size) or b""
    if len(data) < size:
        raise EOFError(f"wanted {size} bytes, got {len(data)}")
    return data


class BitReader:
    """Reads big-endian bit fields of up to 64 bits from a byte stream."""

    def __init__(self, reader: BinaryIO) -> None:
        self.reader = reader
        self._count = 0
        self._bits = 0

    def read_bits64(self, n: int) -> int:
        """Read the next ``n`` bits as an unsigned integer.

        Raises EOFError if the stream cannot supply enough bytes.
        """
        if n < 0 or n > 64:
            raise ValueError(f"bit count must be between 0 and 64: {n}")
        if self._count < n:
            want = (n - self._count + 7) // 8
            data = _read_exact(self.reader, want)
            for byte in data:
                self._bits = ((self._bits << 8) | byte) & _MASK64
            self._count += len(data) * 8
        shift = self._count - n
        value = self._bits >> shift
        self._bits ^= value << shift
        self._count -= n
        return value

    def read_bits(self, n: int) -> int:
        """Read the next ``n`` bits as an unsigned integer."""
        return self.read_bits64(n)

    def read(self, size: int) -> bytes:
        """Read up to ``size`` whole bytes; fewer come back at the end of the stream."""
        out = bytearray()
        while len(out) < size:
            want = min(8, size - len(out))
            try:
                value = self.read_bits64(want * 8)
            except EOFError:
                break
            out += value.to_bytes(want, "big")
        return bytes(out)


class BitWriter:
    """Writes big-endian bit fields to a byte stream, buffering up to 64 bits."""

    def __init__(self, writer: BinaryIO) -> None:
        self.writer = writer
        self._count = 0
        self._bits = 0

    def write_bits64(self, bits: int, n: int) -> None:
        """Append the low ``n`` bits of ``bits``."""
        if n < 0 or n > 64:
            raise ValueError(f"bit count must be between 0 and 64: {n}")
        bits &= (1 << n) - 1
        if self._count + n > 64:
            room = 64 - self._count
            rest = n - room
            high = bits >> rest
            self._bits = ((self._bits << room) | high) & _MASK64
            self._count = 64
            self.flush_bits()
            n = rest
            bits &= (1 << n) - 1
        self._bits = ((self._bits << n) | bits) & _MASK64
        self._count += n

    def write_bits(self, bits: int, n: int) -> None:
        """Append the low ``n`` bits of ``bits``."""
        self.write_bits64(bits, n)

    def write(self, data: bytes) -> int:
        """Append whole bytes at the current bit position; return how many."""
        for byte in bytes(data):
            self.write_bits64(byte, 8)
        return len(data)

    def flush_bits(self) -> None:
        """Write out buffered bits, padding the last byte with zero bits."""
        if self._count == 0:
            return
        bits = self._bits
        if self._count % 8:
            bits <<= 8 - self._count % 8
        want = (self._count + 7) // 8
        self.writer.write((bits & ((1 << (want * 8)) - 1)).to_bytes(want, "big"))
        self._count = 0
        self._bits = 0


class GolombBitReader:
    """Reads single bits and Exp-Golomb codes, most significant bit first."""

    def __init__(self, reader: BinaryIO) -> None:
        self.reader = reader
        self._byte = 0
        self._left = 0

    def read_bit(self) -> int:
        """Read one bit; raise EOFError at the end of the stream."""
        if self._left == 0:
            self._byte = _read_exact(self.reader, 1)[0]
            self._left = 8
        self._left -= 1
        return (self._byte >> self._left) & 1

    def read_bits(self, n: int) -> int:
        """Read ``n`` bits as an unsigned integer."""
        value = 0
        for _ in range(n):
            value = (value << 1) | self.read_bit()
        return value

    def read_exponential_golomb_code(self) -> int:
        """Read an unsigned Exp-Golomb code (ue(v))."""
        zeros = 0
        while self.read_bit() == 0 and zeros < 32:
            zeros += 1
        return self.read_bits(zeros) + (1 << zeros) - 1

    def read_se(self) -> int:
        """Read a signed Exp-Golomb code (se(v)) as a signed integer."""
        code = self.read_exponential_golomb_code()
        if code & 1:
            return (code + 1) // 2
        return -(code // 2)