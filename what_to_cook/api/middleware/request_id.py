"""Request ID middleware for the What To Cook API."""

import uuid

import structlog
from fastapi import Request

REQUEST_ID_HEADER = "X-Request-ID"


async def request_id_middleware(request: Request, call_next):
    """Add unique request ID to each request and response headers.

    Reuses an incoming X-Request-ID so a browser retry can be traced end to end.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

    with structlog.contextvars.bound_contextvars(request_id=request_id):
        response = await call_next(request)

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
