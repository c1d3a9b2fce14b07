"""Middleware for the What To Cook API."""

from what_to_cook.api.middleware.rate_limit import HandlerResult, RateLimitGate
from what_to_cook.api.middleware.request_id import request_id_middleware

__all__ = ["HandlerResult", "RateLimitGate", "request_id_middleware"]
