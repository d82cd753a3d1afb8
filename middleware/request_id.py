"""
Request ID middleware.

Each request gets an id (the client's `X-Request-ID` header when sent,
otherwise a new UUID). The id is stored on `request.state`, echoed back
in the response headers and stamped on every log record emitted while
the request is being handled.
"""

import logging
import uuid
from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-ID"

_current_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)

_base_factory = logging.getLogRecordFactory()


def _record_factory(*args, **kwargs):
    record = _base_factory(*args, **kwargs)
    record.request_id = _current_request_id.get()
    return record


# Installed once; the context var keeps concurrent requests apart
logging.setLogRecordFactory(_record_factory)


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        token = _current_request_id.set(request_id)
        try:
            response: Response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            _current_request_id.reset(token)


def get_request_id(request: Request) -> str:
    """Request id of `request`, or "no-request-id" outside the middleware."""
    return getattr(request.state, "request_id", "no-request-id")
