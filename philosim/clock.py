"""Millisecond clock and an interruptible wait."""

from __future__ import annotations

import time
from collections.abc import Callable

_POLL_SECONDS = 0.0001


def timestamp_ms() -> int:
    """Return the wall-clock time in whole milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def wait_ms(duration_ms: int, stop: Callable[[], bool] | None = None) -> bool:
    """Wait ``duration_ms`` milliseconds, or until ``stop()`` returns true.

    Returns True when the full duration elapsed and False when the wait
    was cut short by ``stop``. A non-positive duration returns at once.
    """
    if duration_ms <= 0:
        return True
    start = timestamp_ms()
    while True:
        elapsed = timestamp_ms() - start
        if elapsed >= duration_ms:
            return True
        if stop is not None and stop():
            return False
        time.sleep(_POLL_SECONDS)