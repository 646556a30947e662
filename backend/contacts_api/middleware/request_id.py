"""
Contacts API — Request ID Middleware
======================================

What:  Tags every contacts request with a correlation ID.
How:   A well-formed client X-Request-ID is reused; anything else (missing,
       too long, or containing characters outside [A-Za-z0-9._-]) is
       replaced by an 8-character UUID prefix. The ID lands in a ContextVar
       read by the access logger and the error handlers, which copy it into
       every error body as `request_id`.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Client IDs end up verbatim in log lines and response headers
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def resolve_request_id(client_value: Optional[str]) -> str:
    """Reuse the client's ID when it is safe to echo, else mint one."""
    if client_value and _VALID_REQUEST_ID.match(client_value):
        return client_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Binds the request ID for the duration of one request and echoes it back."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        # Not reset: the outermost 500 handler reads it after dispatch returns
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
