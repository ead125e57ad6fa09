"""A channel that refuses sends once closed, and a one-shot promise."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

DEFAULT_PROMISE_TIMEOUT = 10.0


class ChannelClosed(Exception):
    """Raised when receiving from a closed channel that has nothing left."""


class SafeChan(Generic[T]):
    """A bounded FIFO channel that can only be closed while no send is in progress.

    A size below one gives a channel with a single slot.
    """

    def __init__(self, size: int = 0) -> None:
        self._capacity = max(size, 1)
        self._items: deque[T] = deque()
        self._cond = threading.Condition()
        self._senders = 0
        self._closed = False

    def send(self, value: T) -> bool:
        """Put ``value`` in, waiting for room; False if the channel is closed."""
        with self._cond:
            if self._closed:
                return False
            self._senders += 1
            try:
                while len(self._items) >= self._capacity:
                    self._cond.wait()
                self._items.append(value)
                self._cond.notify_all()
            finally:
                self._senders -= 1
        return True

    def receive(self, timeout: float | None = None) -> T:
        """Take the next value.

        Raises TimeoutError if nothing arrives in time, and ChannelClosed if
        the channel is closed and empty.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._items or self._closed, timeout):
                raise TimeoutError("nothing received before the timeout")
            if not self._items:
                raise ChannelClosed("channel is closed")
            value = self._items.popleft()
            self._cond.notify_all()
            return value

    def close(self) -> bool:
        """Close the channel if no send is in progress; return whether it closed."""
        with self._cond:
            if self._closed or self._senders != 0:
                return False
            self._closed = True
            self._cond.notify_all()
            return True

    def is_closed(self) -> bool:
        return self._closed

    def is_empty(self) -> bool:
        """Whether the channel is open with no send in progress."""
        return not self._closed and self._senders == 0

    def is_full(self) -> bool:
        """Whether a send is in progress."""
        return not self._closed and self._senders > 0


class Promise(Generic[T]):
    """Carries ``value`` until it is resolved, rejected or times out.

    The first outcome wins. The timeout counts from creation; None means
    the promise never times out.
    """

    def __init__(self, value: T, timeout: float | None = DEFAULT_PROMISE_TIMEOUT) -> None:
        self.value = value
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._error: BaseException | None = None

    def _check_deadline(self) -> None:
        if (
            not self._event.is_set()
            and self._deadline is not None
            and time.monotonic() >= self._deadline
        ):
            self._error = TimeoutError("promise timed out")
            self._event.set()

    def _settle(self, error: BaseException | None) -> None:
        with self._lock:
            self._check_deadline()
            if self._event.is_set():
                return
            self._error = error
            self._event.set()

    @property
    def done(self) -> bool:
        with self._lock:
            self._check_deadline()
            return self._event.is_set()

    def resolve(self) -> None:
        self._settle(None)

    def reject(self, error: BaseException) -> None:
        if not isinstance(error, BaseException):
            raise TypeError("a promise can only be rejected with an exception")
        self._settle(error)

    def wait(self) -> T:
        """Block until settled; return the value or raise the rejection error."""
        if self._deadline is None:
            self._event.wait()
        else:
            self._event.wait(max(self._deadline - time.monotonic(), 0.0))
        with self._lock:
            self._check_deadline()
            error = self._error
        if error is not None:
            raise error
        return self.value

    def then(
        self,
        resolved: Callable[[T], object],
        rejected: Callable[[BaseException], object],
    ) -> threading.Thread:
        """Call ``resolved`` or ``rejected`` from a background thread once settled."""

        def run() -> None:
            try:
                value = self.wait()
            except BaseException as exc:  # noqa: BLE001 - handed to the callback
                rejected(exc)
            else:
                resolved(value)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        return thread