"""
Dashboard Aggregator — Auth Gate Middleware
=============================================

What:  Validates the inbound credential before any gated route runs and
       attaches the caller's Identity to request.state.
How:   extract_token() → TokenVerifier.verify() → request.state.identity.

Policy:
    Every path is gated (pages, static files and the API alike) except
    EXEMPT_PATHS, anything under EXEMPT_PREFIXES and CORS preflights.

    Rejection is never partial:
        /api, /api/...  → 401 {"error": "Not authenticated", "loginUrl": ...}
        anything else   → 302 to <auth service>/login?returnTo=<original URL>
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from dashboard.exceptions import UnauthenticatedError
from dashboard.services.auth import TokenVerifier, build_login_url, extract_token

logger = logging.getLogger(__name__)


def is_api_path(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")


class AuthMiddleware(BaseHTTPMiddleware):

    EXEMPT_PATHS = {"/health"}
    EXEMPT_PREFIXES = ("/assets/",)

    def __init__(
        self,
        app,
        verifier: TokenVerifier,
        auth_service_url: str,
        public_url: str,
        cookie_name: str = "auth_session",
    ):
        super().__init__(app)
        self.verifier = verifier
        self.auth_service_url = auth_service_url
        self.public_url = public_url
        self.cookie_name = cookie_name

    def is_exempt(self, request: Request) -> bool:
        if request.method == "OPTIONS":
            return True
        path = request.url.path
        # StaticFiles resolves dot segments, so /assets/../index.html would
        # otherwise skip the gate and serve a gated page
        if ".." in path.split("/"):
            return False
        return path in self.EXEMPT_PATHS or path.startswith(self.EXEMPT_PREFIXES)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self.is_exempt(request):
            return await call_next(request)

        try:
            token = extract_token(request, self.cookie_name)
            if not token:
                raise UnauthenticatedError(context={"reason": "no credential"})
            identity = await self.verifier.verify(token)
        except UnauthenticatedError as e:
            logger.info("Rejected %s %s: %s", request.method, request.url.path, e.context)
            return self._reject(request, e)

        request.state.identity = identity
        request.state.token = token
        return await call_next(request)

    def _reject(self, request: Request, exc: UnauthenticatedError) -> Response:
        login_url = build_login_url(request, self.auth_service_url, self.public_url)
        if is_api_path(request.url.path):
            return JSONResponse(
                status_code=401,
                content={"error": exc.message, "loginUrl": login_url},
            )
        return RedirectResponse(login_url, status_code=302)
