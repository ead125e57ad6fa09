"""Ring of reusable frames written by one producer and read by many."""

from __future__ import annotations

import threading
from typing import Any, Callable, Generic, TypeVar

from .ring import Ring, new_ring


class DataFrame:
    """A frame slot in a :class:`RingWriter`.

    A frame is either being written or readable. Writing cannot start while
    readers hold the frame; such a frame is marked discarded instead.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._readers = 0
        self._writing = False
        self._discarded = False
        self.sequence = 0
        self.data: Any = None

    @property
    def readable(self) -> bool:
        return not self._writing

    @property
    def readers(self) -> int:
        return self._readers

    def reset(self) -> None:
        """Clear the payload so the frame can be reused."""
        self.data = None

    def ready(self) -> None:
        """Mark the frame as finished and readable."""
        with self._lock:
            self._writing = False

    def reader_enter(self) -> None:
        with self._lock:
            self._readers += 1

    def reader_try_enter(self) -> bool:
        """Become a reader unless the frame is being written or was discarded."""
        with self._lock:
            if self._writing or self._discarded:
                return False
            self._readers += 1
            return True

    def reader_leave(self) -> None:
        with self._lock:
            if self._readers <= 0:
                raise RuntimeError("reader_leave without reader_enter")
            self._readers -= 1

    def start_write(self) -> bool:
        """Claim the frame for writing; fails and discards it if readers remain."""
        with self._lock:
            if self._readers > 0:
                self._discarded = True
                return False
            self._writing = True
            return True

    def is_discarded(self) -> bool:
        return self._discarded


F = TypeVar("F", bound=DataFrame)


class RingWriter(Generic[F]):
    """Writes frames round a ring, growing it past frames still being read."""

    def __init__(self, size: int, constructor: Callable[[], F]) -> None:
        if size <= 0:
            raise ValueError(f"ring size must be positive: {size}")
        self._constructor = constructor
        self._flag_lock = threading.Lock()
        self._dispose_flag = 0
        self._pool: Ring[F] | None = None
        self._pool_size = 0
        self.reader_count = 0
        self.ring: Ring[F] = self._create(size)
        self.size = size
        self.last_value: F = self.ring.value
        self.ring.value.start_write()

    @property
    def value(self) -> F:
        """The frame currently being written."""
        return self.ring.value

    def _create(self, n: int) -> Ring[F]:
        ring = new_ring(n)
        node = ring
        for _ in range(n):
            node.value = self._constructor()
            node = node.next()
        return ring

    def glow(self, size: int) -> Ring[F]:
        """Insert ``size`` frames after the current one, reusing pooled frames first."""
        if size <= 0:
            raise ValueError(f"grow size must be positive: {size}")
        if size < self._pool_size:
            new_item = self._pool.unlink(size)
            self._pool_size -= size
        elif size == self._pool_size:
            new_item = self._pool
            self._pool_size = 0
            self._pool = None
        else:
            new_item = self._create(size - self._pool_size).link(self._pool)
            self._pool_size = 0
            self._pool = None
        self.ring.link(new_item)
        self.size += size
        return new_item

    def _recycle(self, ring: Ring[F]) -> None:
        if self._pool is None:
            self._pool = ring
        else:
            self._pool.link(ring)

    def reduce(self, size: int) -> None:
        """Take ``size`` frames after the current one out of the ring.

        Free frames go to the pool; frames with readers are dropped.
        """
        if size <= 0:
            return
        node = self.ring.unlink(size)
        self.size -= size
        remaining = size
        for _ in range(size):
            frame = node.value
            if frame.start_write():
                frame.reset()
                frame.ready()
                self._pool_size += 1
                node = node.next()
            else:
                frame.reset()
                if remaining == 1:
                    return
                before = node.prev()
                before.unlink(1)
                remaining -= 1
                node = before.next()
        self._recycle(node)

    def dispose(self) -> None:
        """Stop writing; the current frame is released to readers."""
        with self._flag_lock:
            self._dispose_flag -= 2
            idle = self._dispose_flag == -2
        if idle:
            self.ring.value.ready()

    def step(self) -> bool:
        """Publish the current frame and move on to the next.

        Returns False if the ring had to grow past a frame still being read,
        or if the writer has been disposed.
        """
        with self._flag_lock:
            if self._dispose_flag != 0:
                return False
            self._dispose_flag = 1
        last = self.ring.value
        self.last_value = last
        next_sequence = last.sequence + 1
        following = self.ring.next()
        normal = following.value.start_write()
        if normal:
            following.value.reset()
            self.ring = following
        else:
            self.reduce(1)
            self.ring = self.glow(1)
            if not self.ring.value.start_write():
                raise RuntimeError("can't start write")
        self.ring.value.sequence = next_sequence
        last.ready()
        with self._flag_lock:
            disposed = self._dispose_flag != 1
            if not disposed:
                self._dispose_flag = 0
        if disposed:
            self.ring.value.ready()
        return normal