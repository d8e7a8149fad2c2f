"""Time-gated auto refresh."""

from __future__ import annotations

import time
from collections.abc import Callable


class RefreshScheduler:
    """Decides when the current resource is due for a refresh.

    A pure elapsed-time check evaluated on each UI tick. The caller is
    responsible for only acting on it while the controller is idle.

    Example:
        ```python
        scheduler = RefreshScheduler(interval=5.0)
        if scheduler.needs_refresh():
            controller.refresh_current()
        ```
    """

    def __init__(
        self,
        interval: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the scheduler.

        Args:
            interval: Seconds between refreshes.
            clock: Monotonic time source in seconds.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._clock = clock
        self._last_refresh = clock()

    @property
    def interval(self) -> float:
        """Return the refresh interval in seconds."""
        return self._interval

    def needs_refresh(self, now: float | None = None) -> bool:
        """Return True when at least one interval has elapsed."""
        current = self._clock() if now is None else now
        return current - self._last_refresh >= self._interval

    def mark_refreshed(self, now: float | None = None) -> None:
        """Restart the interval."""
        self._last_refresh = self._clock() if now is None else now

    def seconds_until_refresh(self, now: float | None = None) -> float:
        """Return the seconds left before the next refresh is due."""
        current = self._clock() if now is None else now
        return max(0.0, self._interval - (current - self._last_refresh))
