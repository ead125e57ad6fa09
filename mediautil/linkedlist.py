"""Doubly linked list whose items can be handed back to a pool for reuse."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")

POOL_SIZE = 16
"""Most items a pool list keeps; items recycled beyond that are dropped."""


def _require_free(item: ListItem) -> None:
    if item._list is not None:
        raise ValueError("item already in list")


class ListItem(Generic[T]):
    """One link of a :class:`LinkedList`.

    ``pool`` is the list the item returns to when recycled; ``reset`` says
    whether its value is cleared when that happens.
    """

    __slots__ = ("value", "next", "prev", "pool", "_list", "_reset")

    def __init__(
        self,
        value: T | None = None,
        pool: LinkedList[T] | None = None,
        reset: bool = False,
    ) -> None:
        self.value = value
        self.next: ListItem[T] | None = None
        self.prev: ListItem[T] | None = None
        self.pool = pool
        self._list: LinkedList[T] | None = None
        self._reset = reset

    def __repr__(self) -> str:
        return f"ListItem({self.value!r})"

    @property
    def owner(self) -> LinkedList[T] | None:
        """The list this item currently belongs to."""
        return self._list

    def insert_after(self, item: ListItem[T]) -> None:
        """Link ``item`` directly after this one."""
        _require_free(item)
        owner = self._list
        if owner is None or self.next is None:
            raise ValueError("cannot insert next to an item that is not in a list")
        item._list = owner
        item.next = self.next
        item.prev = self
        self.next.prev = item
        self.next = item
        owner._length += 1

    def insert_before(self, item: ListItem[T]) -> None:
        """Link ``item`` directly before this one."""
        _require_free(item)
        if self._list is None or self.prev is None:
            raise ValueError("cannot insert next to an item that is not in a list")
        self.prev.insert_after(item)

    def insert_after_value(self, value: T) -> ListItem[T]:
        """Wrap ``value`` in a new item placed after this one and return it."""
        item: ListItem[T] = ListItem(value)
        self.insert_after(item)
        return item

    def insert_before_value(self, value: T) -> ListItem[T]:
        """Wrap ``value`` in a new item placed before this one and return it."""
        item: ListItem[T] = ListItem(value)
        self.insert_before(item)
        return item

    def is_root(self) -> bool:
        """Whether this is the sentinel that anchors a list."""
        return self._list is not None and self._list._root is self

    def recycle(self) -> None:
        """Return the item to its pool, or detach it if it has no room there."""
        pool = self.pool
        has_pool = pool is not None and self._list is not pool and len(pool) < POOL_SIZE
        if self._reset or not has_pool:
            self.value = None
        if has_pool:
            pool.push(self)
        else:
            self.pool = None
            self._list = None
            self.next = None
            self.prev = None

    def iter_items(self) -> Iterator[ListItem[T]]:
        """Yield this item and those after it up to the end of its list."""
        item: ListItem[T] | None = self
        while item is not None and item._list is not None and not item.is_root():
            yield item
            item = item.next


class LinkedList(Generic[T]):
    """A circular doubly linked list anchored by a sentinel item."""

    def __init__(self) -> None:
        self._root: ListItem[T] = ListItem()
        self._root._list = self
        self._root.next = self._root
        self._root.prev = self._root
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[T]:
        for item in self.iter_items():
            yield item.value

    def __repr__(self) -> str:
        return f"LinkedList({list(self)!r})"

    @property
    def first(self) -> ListItem[T] | None:
        return self._root.next if self._length else None

    @property
    def last(self) -> ListItem[T] | None:
        return self._root.prev if self._length else None

    def push_value(self, value: T) -> ListItem[T]:
        """Append ``value`` in a new item whose value is cleared on recycling."""
        item: ListItem[T] = ListItem(value, reset=True)
        self.push(item)
        return item

    def push(self, item: ListItem[T]) -> None:
        """Append ``item`` at the end."""
        _require_free(item)
        self._root.prev.insert_after(item)

    def unshift_value(self, value: T) -> ListItem[T]:
        """Prepend ``value`` in a new item."""
        item: ListItem[T] = ListItem(value)
        self.unshift(item)
        return item

    def unshift(self, item: ListItem[T]) -> None:
        """Insert ``item`` at the front."""
        _require_free(item)
        self._root.insert_after(item)

    def shift(self) -> ListItem[T] | None:
        """Detach and return the first item, or None if the list is empty."""
        if self._length == 0:
            return None
        head = self._root.next
        self._root.next = head.next
        head.next.prev = self._root
        head.next = None
        head.prev = None
        head._list = None
        self._length -= 1
        return head

    def shift_value(self) -> T:
        """Detach the first item and return its value."""
        head = self.shift()
        if head is None:
            raise IndexError("shift from empty list")
        return head.value

    def pool_shift(self) -> ListItem[T]:
        """Take an item from this pool, or make a new one that belongs to it."""
        head = self.shift()
        if head is None:
            head = ListItem(pool=self)
        return head

    def clear(self) -> None:
        """Drop every item."""
        for item in list(self.iter_items()):
            item._list = None
            item.next = None
            item.prev = None
        self._root.next = self._root
        self._root.prev = self._root
        self._length = 0

    def iter_items(self) -> Iterator[ListItem[T]]:
        """Yield the items from front to back."""
        if self._length > 0:
            yield from self._root.next.iter_items()

    def recycle(self) -> None:
        """Empty the list, recycling each item."""
        while (item := self.shift()) is not None:
            item.recycle()
        if self._length != 0:
            raise RuntimeError("recycle list error")

    def transfer(self, target: LinkedList[T]) -> None:
        """Move every item, in order, to the end of ``target``."""
        while (item := self.shift()) is not None:
            target.push(item)
        if self._length != 0:
            raise RuntimeError("transfer list error")