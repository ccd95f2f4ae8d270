"""
Dashboard Aggregator — Request Logging Middleware
===================================================

What:  One access-log line per request: method, path, status, duration,
       request ID and client IP.
How:   Measures time around call_next and picks the log level from the
       status class (5xx ERROR, 4xx WARNING, otherwise INFO).

Privacy:
    Only the path is logged, never the query string: a `token` query
    parameter carries the user's credential.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from dashboard.middleware.request_id import request_id_var

logger = logging.getLogger("dashboard.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    # Probes hit these every few seconds
    QUIET_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
        )
        return response
