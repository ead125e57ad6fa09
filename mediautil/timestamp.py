"""Smoothing of irregular timestamps into a steadily increasing series."""

from __future__ import annotations


class TimestampProcessor:
    """Turns timestamps that may jump or go backwards into increasing ones.

    Each output advances by the size of the step between inputs. A step
    more than ten times the average restarts the series from the last input,
    advanced by one average step.
    """

    __slots__ = ("_base", "_last", "_total", "_average", "_count")

    def __init__(self) -> None:
        self._base = 0
        self._last = 0
        self._total = 0
        self._average = 0
        self._count = 0

    def process_timestamp(self, timestamp: int) -> int:
        """Take the next input timestamp and return the corrected one."""
        if self._count == 0:
            self._base = timestamp
            self._last = timestamp
            self._count = 1
            return timestamp
        interval = abs(timestamp - self._last)
        if self._average > 0 and interval > 10 * self._average:
            self._base = self._last
            self._total = self._average
            self._count = 1
        else:
            self._total += interval
            self._count += 1
            self._average = self._total // (self._count - 1)
        self._last = timestamp
        return self._base + self._total