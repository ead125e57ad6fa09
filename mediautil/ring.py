"""Circular doubly linked list where any element stands for the whole ring."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class Ring(Generic[T]):
    """An element of a ring. A fresh element is a ring of one.

    Empty rings are represented by None.
    """

    __slots__ = ("value", "_next", "_prev")

    def __init__(self, value: T | None = None) -> None:
        self.value = value
        self._next: Ring[T] = self
        self._prev: Ring[T] = self

    def __repr__(self) -> str:
        return f"Ring({self.value!r})"

    def _nodes(self) -> Iterator[Ring[T]]:
        yield self
        node = self._next
        while node is not self:
            yield node
            node = node._next

    def __len__(self) -> int:
        return sum(1 for _ in self._nodes())

    def __iter__(self) -> Iterator[T]:
        """Yield every value in forward order, starting with this element."""
        for node in self._nodes():
            yield node.value

    def next(self) -> Ring[T]:
        return self._next

    def prev(self) -> Ring[T]:
        return self._prev

    def move(self, n: int) -> Ring[T]:
        """Step ``n`` elements forward, or backward if ``n`` is negative."""
        node = self
        if n < 0:
            for _ in range(-n):
                node = node._prev
        else:
            for _ in range(n):
                node = node._next
        return node

    def link(self, other: Ring[T] | None) -> Ring[T]:
        """Connect ``other`` after this element and return the old next element.

        If both are in the same ring, the elements between them are cut out
        and the returned element refers to that sub-ring. If they are in
        different rings, ``other``'s ring is spliced in after this element.
        """
        following = self._next
        if other is not None:
            before = other._prev
            self._next = other
            other._prev = self
            following._prev = before
            before._next = following
        return following

    def unlink(self, n: int) -> Ring[T] | None:
        """Remove ``n`` elements starting after this one and return them as a ring."""
        if n <= 0:
            return None
        return self.link(self.move(n + 1))


def new_ring(n: int) -> Ring | None:
    """Make a ring of ``n`` elements with empty values; None if ``n`` <= 0."""
    if n <= 0:
        return None
    nodes: list[Ring] = [Ring() for _ in range(n)]
    for node, following in zip(nodes, nodes[1:] + nodes[:1]):
        node._next = following
        following._prev = node
    return nodes[0]