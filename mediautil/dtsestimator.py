"""Estimation of decoding timestamps from presentation timestamps."""

from __future__ import annotations

import bisect

_MASK32 = 0xFFFFFFFF
_CACHE_SIZE = 4


class DTSEstimator:
    """Derives a non-decreasing DTS from a stream of 32-bit PTS values.

    Once B-frames are seen (a PTS going backwards) the DTS is the smallest
    of the last few PTS values. A jump of more than ten times the previous
    interval starts the estimate afresh.
    """

    __slots__ = ("_has_b", "_prev_pts", "_prev_dts", "_cache", "_interval")

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._has_b = False
        self._prev_pts = 0
        self._prev_dts = 0
        self._cache: list[int] = []
        self._interval = 0

    def clone(self) -> DTSEstimator:
        """An independent copy of the estimator's state."""
        copy = DTSEstimator()
        copy._has_b = self._has_b
        copy._prev_pts = self._prev_pts
        copy._prev_dts = self._prev_dts
        copy._cache = list(self._cache)
        copy._interval = self._interval
        return copy

    def _add(self, pts: int) -> None:
        if len(self._cache) >= _CACHE_SIZE:
            del self._cache[0]
        bisect.insort_right(self._cache, pts)

    def feed(self, pts: int) -> int:
        """Take the next PTS and return the estimated DTS."""
        pts &= _MASK32
        interval = abs(pts - self._prev_pts)
        if interval > (10 * self._interval) & _MASK32:
            self._reset()
        self._interval = interval
        self._add(pts)
        dts = pts
        if not self._has_b:
            if pts < self._prev_pts:
                self._has_b = True
                dts = self._cache[0]
        else:
            dts = self._cache[0]
        if self._prev_dts > dts:
            dts = self._prev_dts
        self._prev_pts = pts
        self._prev_dts = dts
        return dts