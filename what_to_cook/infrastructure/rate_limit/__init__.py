"""Rate limiting module for the What To Cook API.

Session-scoped request quota: a counter stored in the HTTP session, a policy
holding the ceiling and window, and dependencies for route handlers.
"""

from what_to_cook.infrastructure.rate_limit.counter import (
    COUNT_KEY,
    RESET_TIME_KEY,
    RequestCounter,
)
from what_to_cook.infrastructure.rate_limit.deps import get_quota_policy, get_request_counter
from what_to_cook.infrastructure.rate_limit.policy import QuotaPolicy

__all__ = [
    "COUNT_KEY",
    "RESET_TIME_KEY",
    "QuotaPolicy",
    "RequestCounter",
    "get_quota_policy",
    "get_request_counter",
]
