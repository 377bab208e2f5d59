"""Retrying and polling of condition functions."""

from __future__ import annotations

import random
import time
from collections.abc import Callable

__all__ = ["WaitTimeoutError", "retry", "poll", "poll_immediate"]

_BACKOFF_STEPS = 10
_BACKOFF_FACTOR = 1.25
_BACKOFF_DURATION = 5
_BACKOFF_JITTER = 1.0

Condition = Callable[[], bool]


class WaitTimeoutError(TimeoutError):
    """Raised when a condition is not met in the time or attempts allowed."""

    def __init__(self, message: str = "timed out waiting for the condition") -> None:
        super().__init__(message)


def _jitter(duration: float, factor: float) -> float:
    return duration + random.random() * factor * duration


def retry(condition: Condition, initial_backoff_sec: float = 0) -> None:
    """Call ``condition`` until it returns True, backing off exponentially.

    Up to ten attempts are made; the delay starts at ``initial_backoff_sec``
    (5 seconds if not positive), grows by a factor of 1.25 and is jittered.
    Exceptions from ``condition`` propagate; WaitTimeoutError is raised when
    the attempts run out.
    """
    delay = float(initial_backoff_sec) if initial_backoff_sec > 0 else float(_BACKOFF_DURATION)
    for attempt in range(_BACKOFF_STEPS):
        if condition():
            return
        if attempt == _BACKOFF_STEPS - 1:
            break
        time.sleep(_jitter(delay, _BACKOFF_JITTER))
        delay *= _BACKOFF_FACTOR
    raise WaitTimeoutError()


def _poll(interval: float, timeout: float, condition: Condition, immediate: bool) -> None:
    deadline = time.monotonic() + timeout
    if immediate and condition():
        return
    while True:
        time.sleep(interval)
        if time.monotonic() > deadline:
            raise WaitTimeoutError()
        if condition():
            return


def poll(interval: float, timeout: float, condition: Condition) -> None:
    """Check ``condition`` every ``interval`` seconds until it holds.

    The first check happens after one interval. Raises WaitTimeoutError once
    ``timeout`` seconds have passed; exceptions from ``condition`` propagate.
    """
    _poll(interval, timeout, condition, immediate=False)


def poll_immediate(interval: float, timeout: float, condition: Condition) -> None:
    """Like :func:`poll`, but check ``condition`` once before the first wait."""
    _poll(interval, timeout, condition, immediate=True)