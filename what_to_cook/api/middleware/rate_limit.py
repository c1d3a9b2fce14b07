"""Session quota gate for the recipe creation endpoint.

Wraps the request pipeline: rejects a session that has used up its quota with
429, counts only requests the handler completed with 200/201, and merges the
remaining quota into successful JSON responses.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from what_to_cook.config import RECIPES_PATH
from what_to_cook.core.logging import logger
from what_to_cook.infrastructure.rate_limit import QuotaPolicy, RequestCounter
from what_to_cook.infrastructure.rate_limit.policy import pluralize

SUCCESS_STATUSES = frozenset({200, 201})
RATE_LIMIT_ERROR = "Rate limit exceeded. Please try again later."
HANDLER_ERROR = "An unexpected error occurred"
HANDLER_FAILED_KEY = "what_to_cook.handler_failed"


@dataclass
class HandlerResult:
    """Wrapped handler output, normalized once at the gate boundary."""

    status_code: int
    headers: List[Tuple[bytes, bytes]]
    body: bytes

    def to_response(self) -> Response:
        response = Response(content=self.body, status_code=self.status_code)
        headers = [(key, value) for key, value in self.headers if key.lower() != b"content-length"]
        headers.append((b"content-length", str(len(self.body)).encode("latin-1")))
        response.raw_headers = headers
        return response


async def normalize_response(response: Response) -> HandlerResult:
    """Drain a handler response into a HandlerResult."""
    body_iterator = getattr(response, "body_iterator", None)
    if body_iterator is None:
        body = bytes(response.body)
    else:
        chunks = []
        async for chunk in body_iterator:
            chunks.append(chunk if isinstance(chunk, bytes) else chunk.encode(response.charset))
        body = b"".join(chunks)
    return HandlerResult(
        status_code=response.status_code,
        headers=list(response.raw_headers),
        body=body,
    )


def merge_quota_fields(result: HandlerResult, fields: Dict[str, Any]) -> HandlerResult:
    """Return result with fields merged into its JSON object body.

    A body that is not a JSON object comes back unchanged.
    """
    try:
        payload = json.loads(result.body)
    except (UnicodeDecodeError, ValueError) as e:
        logger.warning("quota_body_rewrite_skipped", reason="invalid_json", error=str(e))
        return result

    if not isinstance(payload, dict):
        logger.warning("quota_body_rewrite_skipped", reason="not_an_object")
        return result

    payload.update(fields)
    body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return HandlerResult(status_code=result.status_code, headers=result.headers, body=body)


def track_handler_failure(app: ASGIApp) -> ASGIApp:
    """Mark the scope when app raises, including after its response has started.

    call_next ends a streamed body quietly when the handler fails mid-stream,
    so the flag is the only sign that the drained body is incomplete.
    """

    async def tracked(scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await app(scope, receive, send)
        except Exception:
            scope[HANDLER_FAILED_KEY] = True
            raise

    return tracked


class RateLimitGate(BaseHTTPMiddleware):
    """Enforces the per-session recipe request quota.

    Must sit inside SessionMiddleware so request.session is available.

    Args:
        app: Wrapped ASGI application
        policy: Quota ceiling, window and clock (defaults to environment config)
        path_prefix: Gated path prefix; only POSTs accepting JSON are gated
    """

    def __init__(
        self,
        app: ASGIApp,
        policy: Optional[QuotaPolicy] = None,
        path_prefix: str = RECIPES_PATH,
    ):
        super().__init__(track_handler_failure(app))
        self.policy = policy or QuotaPolicy.from_config()
        self.path_prefix = path_prefix

    def is_gated(self, request: Request) -> bool:
        accept = request.headers.get("accept", "")
        return (
            request.method == "POST"
            and request.url.path.startswith(self.path_prefix)
            and "application/json" in accept
        )

    def _counter_for(self, request: Request) -> Optional[RequestCounter]:
        try:
            return self.policy.counter_for(request.session)
        except Exception as e:
            logger.error("rate_limit_session_unavailable", path=request.url.path, error=str(e))
            return None

    def rejection(self, counter: RequestCounter) -> JSONResponse:
        """429 response for a session that has used up its quota."""
        content: Dict[str, Any] = {"error": RATE_LIMIT_ERROR, "remaining_requests": 0}
        content.update(self.policy.retry_fields(counter))
        return JSONResponse(status_code=429, content=content)

    def quota_fields(self, counter: RequestCounter) -> Dict[str, Any]:
        """Quota metadata merged into a successful response."""
        if not self.policy.limit_exceeded(counter):
            return {"remaining_requests": self.policy.remaining(counter)}

        fields: Dict[str, Any] = {"limit_reached": True, "remaining_requests": 0}
        minutes = counter.reset_in_minutes()
        message = (
            f"You have used all {self.policy.max_requests} recipe requests for now."
        )
        if minutes is not None:
            message += f" Please try again in {pluralize(minutes, 'minute')}."
        fields["message"] = message
        return fields

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.is_gated(request):
            return await call_next(request)

        counter = self._counter_for(request)
        if counter is None:
            return await call_next(request)

        if self.policy.limit_exceeded(counter):
            logger.warning(
                "rate_limit_exceeded",
                path=request.url.path,
                count=counter.current_count(),
                limit=self.policy.max_requests,
                reset_in_minutes=counter.reset_in_minutes(),
            )
            return self.rejection(counter)

        response = await call_next(request)

        if response.status_code not in SUCCESS_STATUSES:
            logger.info(
                "request_not_counted",
                path=request.url.path,
                status_code=response.status_code,
                count=counter.current_count(),
            )
            return response

        result = await normalize_response(response)
        if request.scope.get(HANDLER_FAILED_KEY):
            logger.error(
                "request_not_counted",
                path=request.url.path,
                status_code=response.status_code,
                reason="handler_failed",
                count=counter.current_count(),
            )
            return JSONResponse(
                status_code=500,
                content={"error": HANDLER_ERROR, "remaining_requests": self.policy.remaining(counter)},
            )

        count = counter.increment()
        logger.info(
            "request_counted",
            path=request.url.path,
            count=count,
            remaining=self.policy.remaining(counter),
        )
        return merge_quota_fields(result, self.quota_fields(counter)).to_response()
