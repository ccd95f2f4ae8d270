"""
Dashboard Aggregator — Request ID Middleware
==============================================

What:  Assigns a short correlation ID to each request and returns it in the
       X-Request-ID response header.
Why:   One overview request fans out to several backends; the ID ties the
       per-backend warnings in the log back to the request that caused them.
How:   Reuses a client-provided X-Request-ID or generates one, stores it in a
       ContextVar (for loggers and handlers) and in request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests share a thread but not this value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = rid
        return response
