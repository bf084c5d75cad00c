"""
Request ID middleware.

Every request gets an id (the client's X-Request-ID header, or a fresh
UUID). It is stored on request.state, echoed back in the response headers
and exposed through a context variable so log records emitted while the
request is being served can carry it.
"""

import uuid
from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Adds a unique request id to each request and its response.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        token = current_request_id.set(request_id)

        try:
            response: Response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            current_request_id.reset(token)


def get_request_id(request: Request) -> str:
    """
    Request id stored by RequestIDMiddleware, or "no-request-id".
    """
    return getattr(request.state, "request_id", "no-request-id")
