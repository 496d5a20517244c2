"""Liveness poll policy and cancellation.

This module provides the retry policy used while waiting for a server to
come up or go down, and a cancellation token that lets another thread abort
the wait early.
"""

import threading
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PollPolicy:
    """Bounded liveness poll policy with optional exponential backoff.

    The delay before poll attempt ``n`` (0-indexed) is:
        delay = min(interval * (multiplier ^ n), max_interval)

    With the defaults this is the classic fixed policy of 30 polls one
    second apart.

    Attributes:
        max_attempts: Number of liveness checks before giving up.
        interval: Delay in seconds between the first two checks.
        multiplier: Factor applied to the delay after each check.
        max_interval: Upper bound on a single delay, in seconds.
    """

    max_attempts: int = 30
    interval: float = 1.0
    multiplier: float = 1.0
    max_interval: float = 30.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.interval < 0:
            msg = f"interval must not be negative, got {self.interval}"
            raise ValueError(msg)
        if self.multiplier < 1:
            msg = f"multiplier must be at least 1, got {self.multiplier}"
            raise ValueError(msg)
        if self.max_interval <= 0:
            msg = f"max_interval must be positive, got {self.max_interval}"
            raise ValueError(msg)

    def delay(self, attempt: int) -> float:
        """Calculate the delay after a given attempt.

        Args:
            attempt: The attempt number (0-indexed).

        Returns:
            The delay in seconds before the next check, never more than
            max_interval.
        """
        if self.interval == 0 or self.multiplier == 1:
            return min(self.interval, self.max_interval)
        try:
            grown = self.interval * self.multiplier**attempt
        except OverflowError:
            # Growth past the float range is far beyond any cap
            return self.max_interval
        return min(grown, self.max_interval)

    def ceiling(self) -> float:
        """Return the worst-case total wait in seconds."""
        return sum(self.delay(attempt) for attempt in range(self.max_attempts))


class CancellationToken:
    """Thread-safe flag used to abort a liveness poll early.

    Cancelling only stops the wait. A process that was already spawned or
    signalled is left as it is.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return True once cancellation was requested."""
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, waking early on cancellation.

        Args:
            timeout: Maximum time to sleep in seconds.

        Returns:
            True if cancellation was requested.
        """
        return self._event.wait(timeout)
