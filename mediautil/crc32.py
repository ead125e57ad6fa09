"""Table-driven CRC-32 (reflected, no final inversion) with stream wrappers."""

from __future__ import annotations

from typing import BinaryIO

_POLYNOMIAL = 0xEDB88320


def _make_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ _POLYNOMIAL if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


CRC32_TABLE = _make_table()


def crc32_update(crc: int, data: bytes) -> int:
    """Feed ``data`` into the running checksum ``crc``."""
    crc &= 0xFFFFFFFF
    for byte in bytes(data):
        crc = CRC32_TABLE[(byte ^ crc) & 0xFF] ^ (crc >> 8)
    return crc


class Crc32Reader:
    """Reader that keeps a checksum of every byte read through it."""

    def __init__(self, reader: BinaryIO, crc32: int = 0) -> None:
        self.reader = reader
        self.crc32 = crc32

    def read(self, size: int = -1) -> bytes:
        data = self.reader.read(size)
        self.crc32 = crc32_update(self.crc32, data)
        return data

    def read_crc32_and_check(self) -> None:
        """Consume the 4-byte trailing checksum and verify the residue is zero."""
        remaining = 4
        while remaining:
            piece = self.read(remaining)
            if not piece:
                raise EOFError("stream ended before the checksum")
            remaining -= len(piece)
        if self.crc32 != 0:
            raise ValueError(f"crc32({self.crc32:x}) != 0")


class Crc32Writer:
    """Writer that keeps a checksum of every byte written through it."""

    def __init__(self, writer: BinaryIO, crc32: int = 0) -> None:
        self.writer = writer
        self.crc32 = crc32

    def write(self, data: bytes) -> int:
        written = self.writer.write(data)
        self.crc32 = crc32_update(self.crc32, data)
        return len(data) if written is None else written