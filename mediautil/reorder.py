"""Reordering of RTP packets that arrive out of sequence."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")

RTP_REORDER_BUFFER_LEN = 50
_SEQ_MASK = 0xFFFF


class RTPReorder(Generic[T]):
    """Holds early packets back until the ones before them arrive.

    Slot 0 of the queue stands for the packet after the last one released.
    ``total`` counts packets pushed, ``drop`` those discarded.
    """

    def __init__(self, buffer_len: int = RTP_REORDER_BUFFER_LEN) -> None:
        if buffer_len <= 0:
            raise ValueError(f"buffer length must be positive: {buffer_len}")
        self.buffer_len = buffer_len
        self.total = 0
        self.drop = 0
        self._last_seq = 0
        self._queue: list[T | None] = []

    def _shift(self) -> T | None:
        self._queue.pop(0)
        self._queue.append(None)
        return self._queue[0]

    def push(self, seq: int, value: T) -> T | None:
        """Offer packet ``seq``; return a packet ready to use now, if any."""
        if value is None:
            raise ValueError("cannot push None")
        self.total += 1
        seq &= _SEQ_MASK
        size = self.buffer_len
        if not self._queue:
            self._last_seq = seq
            self._queue = [None] * size
            return value
        if seq < self._last_seq and self._last_seq - seq < 0x8000:
            self.drop += 1
            return None
        delta = (seq - self._last_seq) & _SEQ_MASK
        if delta == 0:
            self.drop += 1
            return None
        if delta == 1:
            self._last_seq = seq
            self._shift()
            return value
        if delta > size:
            while True:
                self._last_seq = (self._last_seq + 1) & _SEQ_MASK
                delta -= 1
                head = self._shift()
                if delta == size:
                    self._queue[size - 1] = value
                    self._queue[0] = None
                    return head
                if head is not None:
                    self.drop += 1
        self._queue[delta - 1] = value
        return None

    def pop(self) -> T | None:
        """Release the next held packet if it is due; call until it gives None."""
        if not self._queue:
            return None
        head = self._queue[0]
        if head is not None:
            self._last_seq = (self._last_seq + 1) & _SEQ_MASK
            self._shift()
        return head