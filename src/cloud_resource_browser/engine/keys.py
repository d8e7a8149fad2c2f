"""Two-key sequence detection (``g g``)."""

from __future__ import annotations

import time


class KeySequence:
    """Detects the same key pressed twice within a time window.

    State is the last key and when it was pressed. A completed sequence
    resets the state, so a third press starts a new sequence.
    """

    def __init__(self, window_ms: int = 250) -> None:
        self._window = window_ms / 1000
        self._last_key: str | None = None
        self._last_time = 0.0

    def feed(self, key: str, now: float | None = None) -> bool:
        """Record a key press.

        Args:
            key: The decoded key name.
            now: Press time in seconds. Defaults to a monotonic clock.

        Returns:
            True if this press completes a sequence.
        """
        current = time.monotonic() if now is None else now
        if self._last_key == key and current - self._last_time <= self._window:
            self.reset()
            return True
        self._last_key = key
        self._last_time = current
        return False

    def reset(self) -> None:
        """Forget the last key."""
        self._last_key = None
        self._last_time = 0.0
