"""Session-backed request counter for the recipe quota.

The counter is a view over two session keys. It owns no storage, performs no
I/O and is rebuilt for every request from whatever session mapping the host
framework hands it.
"""

import math
import time
from typing import Any, Callable, MutableMapping, Optional

from what_to_cook.config import DEFAULT_WINDOW_SECONDS

COUNT_KEY = "api_requests_count"
RESET_TIME_KEY = "api_requests_reset_time"

Clock = Callable[[], float]


def _as_count(value: Any) -> Optional[int]:
    """Return value as a non-negative int, or None when it is absent or malformed."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value >= 0 else None


def _as_timestamp(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return int(value)


class RequestCounter:
    """Per-session count of quota-consuming requests within a rolling window.

    Args:
        session: Mutable session mapping (``request.session`` or a plain dict)
        window_seconds: Length of the quota window
        clock: Returns the current epoch time in seconds
    """

    def __init__(
        self,
        session: MutableMapping[str, Any],
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        clock: Clock = time.time,
    ):
        self._session = session
        self.window_seconds = window_seconds
        self._clock = clock
        self.ensure_initialized()

    def _now(self) -> int:
        return int(self._clock())

    def _start_window(self, window_seconds: int) -> None:
        self._session[COUNT_KEY] = 0
        self._session[RESET_TIME_KEY] = self._now() + window_seconds

    def ensure_initialized(self) -> None:
        """Create the count and reset time if the count is absent or malformed."""
        if _as_count(self._session.get(COUNT_KEY)) is None:
            self._start_window(self.window_seconds)

    def current_count(self) -> int:
        count = _as_count(self._session.get(COUNT_KEY))
        return count if count is not None else 0

    def remaining(self, max_requests: int) -> int:
        """Requests left in the current window, never negative."""
        return max(max_requests - self.current_count(), 0)

    def limit_exceeded(self, max_requests: int) -> bool:
        return self.current_count() >= max_requests

    def increment(self) -> int:
        """Count one more request and return the new count."""
        count = self.current_count() + 1
        self._session[COUNT_KEY] = count
        return count

    def reset_if_expired(self, window_seconds: Optional[int] = None) -> bool:
        """Start a new window when the current one has elapsed.

        Must run before any quota check in a request cycle. A missing or
        malformed reset time counts as elapsed.

        Returns:
            True if the count was reset
        """
        window = window_seconds if window_seconds is not None else self.window_seconds
        reset_at = self.reset_at()
        if reset_at is not None and self._now() < reset_at:
            return False
        self._start_window(window)
        return True

    def reset_at(self) -> Optional[int]:
        """Epoch second at which the current window ends, if known."""
        return _as_timestamp(self._session.get(RESET_TIME_KEY))

    def reset_in_minutes(self) -> Optional[int]:
        """Minutes until the window ends, rounded up and floored at zero."""
        reset_at = self.reset_at()
        if reset_at is None:
            return None
        return max(math.ceil((reset_at - self._now()) / 60), 0)
