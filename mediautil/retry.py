"""Retrying a call with exponential back-off and jitter."""

from __future__ import annotations

import random
import time
from typing import Callable, TypeVar

T = TypeVar("T")


class RetryStop(Exception):
    """Raised from a retried call to stop retrying and re-raise ``error``."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(error)
        self.error = error


def retry(attempts: int, sleep: float, func: Callable[[], T]) -> T:
    """Call ``func`` up to ``attempts`` times, sleeping between failures.

    Each pause is the current delay plus up to half of it again at random;
    the delay doubles after every pause. A ``RetryStop`` ends the retries at
    once and its wrapped error is raised. The last failure is re-raised.
    """
    while True:
        try:
            return func()
        except RetryStop as stop:
            raise stop.error from None
        except Exception:
            attempts -= 1
            if attempts <= 0:
                raise
            jitter = random.uniform(0, sleep) if sleep > 0 else 0.0
            sleep += jitter / 2
            time.sleep(sleep)
            sleep *= 2