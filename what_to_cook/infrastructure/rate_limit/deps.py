"""FastAPI dependencies exposing the session request counter to route handlers."""

from fastapi import Depends, Request

from what_to_cook.infrastructure.rate_limit.counter import RequestCounter
from what_to_cook.infrastructure.rate_limit.policy import QuotaPolicy


def get_quota_policy(request: Request) -> QuotaPolicy:
    """Get the quota policy from app state.

    Note:
        Falls back to environment configuration if app.state.quota_policy is not set.
    """
    policy = getattr(request.app.state, "quota_policy", None)
    return policy or QuotaPolicy.from_config()


def get_request_counter(
    request: Request, policy: QuotaPolicy = Depends(get_quota_policy)
) -> RequestCounter:
    """Request counter over the caller's session.

    Requires SessionMiddleware. Reads and rolls over the same session keys the
    rate-limit gate uses, so handlers and gate see one consistent count.
    """
    return policy.counter_for(request.session)
