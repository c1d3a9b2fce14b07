"""Quota policy shared by the rate-limit gate and request handlers."""

import time
from dataclasses import dataclass
from typing import Any, Dict, MutableMapping, Optional

from what_to_cook.config import Config
from what_to_cook.infrastructure.rate_limit.counter import Clock, RequestCounter


def pluralize(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


@dataclass(frozen=True)
class QuotaPolicy:
    """Quota ceiling, window length and clock for session request counters."""

    max_requests: int
    window_seconds: int
    clock: Clock = time.time

    @classmethod
    def from_config(cls, clock: Optional[Clock] = None) -> "QuotaPolicy":
        """Build the policy from MAX_REQUESTS and WINDOW_DURATION."""
        return cls(
            max_requests=Config.max_requests(),
            window_seconds=Config.window_seconds(),
            clock=clock or time.time,
        )

    def counter_for(self, session: MutableMapping[str, Any]) -> RequestCounter:
        """Return a counter over session with any elapsed window already rolled over."""
        counter = RequestCounter(session, window_seconds=self.window_seconds, clock=self.clock)
        counter.reset_if_expired()
        return counter

    def remaining(self, counter: RequestCounter) -> int:
        return counter.remaining(self.max_requests)

    def limit_exceeded(self, counter: RequestCounter) -> bool:
        return counter.limit_exceeded(self.max_requests)

    def retry_fields(self, counter: RequestCounter) -> Dict[str, Any]:
        """reset_in_minutes and a retry hint, empty when the reset time is unknown."""
        minutes = counter.reset_in_minutes()
        if minutes is None:
            return {}
        return {
            "reset_in_minutes": minutes,
            "message": f"Please try again in {pluralize(minutes, 'minute')}",
        }

    def snapshot(self, counter: RequestCounter) -> Dict[str, Any]:
        """Quota state for the session, as reported by GET /api/v1/quota."""
        return {
            "max_requests": self.max_requests,
            "used_requests": min(counter.current_count(), self.max_requests),
            "remaining_requests": self.remaining(counter),
            "limit_reached": self.limit_exceeded(counter),
            "reset_in_minutes": counter.reset_in_minutes(),
            "window_seconds": self.window_seconds,
        }
