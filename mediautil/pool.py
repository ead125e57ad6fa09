"""Chains of byte fragments and a size-graded pool of reusable byte blocks."""

from __future__ import annotations

from collections.abc import Iterator
from typing import BinaryIO

from .linkedlist import LinkedList, ListItem

_MASK32 = 0xFFFFFFFF


class BLLReader:
    """Reads bytes across the fragments of a :class:`BLL`, starting at ``item``."""

    __slots__ = ("_item", "_pos")

    def __init__(self, item: ListItem | None = None, pos: int = 0) -> None:
        self._item = item
        self._pos = pos

    def can_read(self) -> bool:
        """Whether the reader still points at a fragment of its chain."""
        return self._item is not None and not self._item.is_root()

    def _advance(self) -> None:
        self._item = self._item.next
        self._pos = 0

    def skip(self, n: int) -> None:
        """Move ``n`` bytes forward; raise EOFError if the chain ends first."""
        while self.can_read():
            left = len(self._item.value) - self._pos
            if left > n:
                self._pos += n
                return
            n -= left
            self._advance()
        if n > 0:
            raise EOFError("cannot skip past the end of the data")

    def read_byte(self) -> int:
        """Read one byte; raise EOFError at the end of the chain."""
        while self.can_read():
            value = self._item.value
            if self._pos < len(value):
                byte = value[self._pos]
                self._pos += 1
                return byte
            self._advance()
        raise EOFError("no more bytes to read")

    def leb128_unmarshal(self) -> tuple[int, int]:
        """Decode an unsigned LEB128 value of at most 8 bytes.

        Returns the value and the number of bytes it took.
        """
        value = 0
        count = 0
        for shift in range(0, 56, 7):
            byte = self.read_byte()
            value |= (byte & 0x7F) << shift
            count += 1
            if not byte & 0x80:
                break
        return value, count

    def read_be(self, n: int) -> int:
        """Read ``n`` bytes as a big-endian unsigned 32-bit integer."""
        value = 0
        for _ in range(n):
            value = ((value << 8) | self.read_byte()) & _MASK32
        return value

    def read_n(self, n: int) -> list[bytes]:
        """Read up to ``n`` bytes, returned as the pieces they span."""
        pieces: list[bytes] = []
        while self.can_read() and n > 0:
            value = self._item.value
            left = len(value) - self._pos
            if left > n:
                pieces.append(bytes(value[self._pos:self._pos + n]))
                self._pos += n
                return pieces
            if left > 0:
                pieces.append(bytes(value[self._pos:]))
            n -= left
            self._advance()
        return pieces

    def offset(self) -> int:
        """Position inside the current fragment."""
        return self._pos


class BLL(LinkedList):
    """A linked list of byte fragments that keeps their total length."""

    def __init__(self) -> None:
        super().__init__()
        self.byte_length = 0

    def new_reader(self) -> BLLReader:
        return BLLReader(self.first)

    def push(self, item: ListItem) -> None:
        super().push(item)
        self.byte_length += len(item.value)

    def unshift(self, item: ListItem) -> None:
        super().unshift(item)
        self.byte_length += len(item.value)

    def shift(self) -> ListItem | None:
        item = super().shift()
        if item is not None:
            self.byte_length -= len(item.value)
        return item

    def clear(self) -> None:
        super().clear()
        self.byte_length = 0

    def to_buffers(self) -> list:
        """The fragments, front to back."""
        return list(self)

    def write_to(self, writer: BinaryIO) -> int:
        """Write every fragment to ``writer``; return the byte count."""
        total = 0
        for piece in self:
            writer.write(piece)
            total += len(piece)
        return total

    def to_bytes(self) -> bytes:
        return b"".join(self)

    def recycle(self) -> None:
        """Empty the list, returning fragments to their pools."""
        super().recycle()
        self.byte_length = 0

    def get_byte(self, index: int) -> int:
        """The byte at ``index`` counted across all fragments."""
        if index < 0:
            raise IndexError(f"byte index out of range: {index}")
        for piece in self:
            if index < len(piece):
                return piece[index]
            index -= len(piece)
        raise IndexError("byte index out of range")

    def get_uint24(self, index: int) -> int:
        return self.get_uint_n(index, 3)

    def get_uint_n(self, index: int, n: int) -> int:
        """Big-endian unsigned value of ``n`` bytes starting at ``index``."""
        value = 0
        for offset in range(n):
            value = ((value << 8) | self.get_byte(index + offset)) & _MASK32
        return value


class BLLsReader:
    """Reads bytes across every :class:`BLL` of a :class:`BLLs`."""

    __slots__ = ("_item", "_reader")

    def __init__(self, item: ListItem | None, reader: BLLReader) -> None:
        self._item = item
        self._reader = reader

    def can_read(self) -> bool:
        return self._item is not None and not self._item.is_root()

    def read_byte(self) -> int:
        """Read one byte; raise EOFError once every chain is exhausted."""
        while True:
            if self._reader.can_read():
                try:
                    return self._reader.read_byte()
                except EOFError:
                    pass
            if self._item is None:
                raise EOFError("no more bytes to read")
            self._item = self._item.next
            if not self.can_read():
                raise EOFError("no more bytes to read")
            self._reader = self._item.value.new_reader()


class BLLs:
    """A list of :class:`BLL` chains with their total byte length."""

    def __init__(self) -> None:
        self._blls: LinkedList[BLL] = LinkedList()
        self.byte_length = 0

    def __len__(self) -> int:
        return len(self._blls)

    def __iter__(self) -> Iterator[BLL]:
        return iter(self._blls)

    def push_value(self, bll: BLL) -> None:
        """Append a whole chain."""
        self._blls.push_value(bll)
        self.byte_length += bll.byte_length

    def push(self, item: ListItem) -> None:
        """Append a fragment to the last chain, starting one if there is none."""
        last = self._blls.last
        if last is None:
            bll = BLL()
            bll.push(item)
            self.push_value(bll)
        else:
            last.value.push(item)
            self.byte_length += len(item.value)

    def to_list(self) -> list[list]:
        return [bll.to_buffers() for bll in self._blls]

    def to_buffers(self) -> list:
        return [piece for bll in self._blls for piece in bll.to_buffers()]

    def to_bytes(self) -> bytes:
        return b"".join(bll.to_bytes() for bll in self._blls)

    def recycle(self) -> None:
        for bll in self._blls:
            bll.recycle()
        self._blls.clear()
        self.byte_length = 0

    def new_reader(self) -> BLLsReader:
        first = self._blls.first
        if first is None:
            return BLLsReader(None, BLLReader())
        return BLLsReader(first, first.value.new_reader())


class BytesPool:
    """Pools of byte blocks graded by power-of-two size.

    Level 0 holds shells for outside memory; level ``i`` holds blocks of up
    to ``2 ** i`` bytes.
    """

    def __init__(self, levels: int = 17) -> None:
        if levels < 0:
            raise ValueError(f"number of levels must not be negative: {levels}")
        self.levels: list[LinkedList] = [LinkedList() for _ in range(levels)]

    def get_shell(self, data: bytes | bytearray) -> ListItem:
        """Wrap ``data`` in an item whose shell, not its bytes, is recycled."""
        if not self.levels:
            return ListItem(data)
        shells = self.levels[0]
        item = shells.shift()
        if item is None:
            item = ListItem(pool=shells, reset=True)
        item.value = data
        return item

    def get(self, size: int) -> ListItem:
        """An item holding a ``size``-byte block, reused from the pool if possible."""
        if size < 0:
            raise ValueError(f"size must not be negative: {size}")
        for exponent in range(1, len(self.levels)):
            if (1 << exponent) >= size:
                item = self.levels[exponent].pool_shift()
                block = item.value
                if isinstance(block, bytearray):
                    if len(block) > size:
                        del block[size:]
                    else:
                        block.extend(bytes(size - len(block)))
                else:
                    item.value = bytearray(size)
                return item
        return ListItem(bytearray(size), reset=True)