"""
Request ID middleware: one id per request, echoed in X-Request-ID and
stamped on every log record emitted while the request is handled.
"""

import uuid
import logging
from contextvars import ContextVar
from typing import Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_current_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def _install_record_factory():
    old_factory = logging.getLogRecordFactory()
    if getattr(old_factory, "adds_request_id", False):
        return

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        record.request_id = _current_request_id.get()
        return record

    record_factory.adds_request_id = True
    logging.setLogRecordFactory(record_factory)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Uses the client's X-Request-ID when present, otherwise a new UUID4.

    The id lives in a context variable rather than a global, so concurrent
    requests never see each other's id.
    """

    def __init__(self, app):
        super().__init__(app)
        _install_record_factory()

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
