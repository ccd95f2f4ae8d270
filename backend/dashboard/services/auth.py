"""
Dashboard Aggregator — Token Verification
===========================================

What:  Finds the inbound credential and turns it into an Identity.
How:   One verifier per deployment, selected by AUTH_MODE:
         remote: GET <auth service>/api/verify with the bearer token
         local:  check the JWT signature with the shared signing secret
Who:   Used by AuthMiddleware before every gated route.

Credential lookup order:
    1. `token` query parameter (links handed out by the identity provider)
    2. session cookie (AUTH_COOKIE_NAME, default "auth_session")
    3. `Authorization: Bearer <token>` header
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import urlencode

import httpx
import jwt
from starlette.requests import Request

from dashboard.config import Settings
from dashboard.exceptions import UnauthenticatedError
from dashboard.schemas.responses import Identity
from dashboard.services.upstream import build_url

logger = logging.getLogger(__name__)

TOKEN_QUERY_PARAM = "token"


def extract_token(request: Request, cookie_name: str) -> Optional[str]:
    """Return the first non-empty credential, or None."""
    token = request.query_params.get(TOKEN_QUERY_PARAM)
    if token:
        return token
    token = request.cookies.get(cookie_name)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def build_login_url(request: Request, auth_service_url: str, public_url: str) -> str:
    """
    Login page URL that sends the user back to the page they asked for.

    The `token` query parameter is dropped from the returnTo URL so a
    rejected credential does not bounce back into the next request.
    """
    query = [(k, v) for k, v in request.query_params.multi_items() if k != TOKEN_QUERY_PARAM]
    original = request.url.path
    if query:
        original = f"{original}?{urlencode(query)}"
    return_to = f"{public_url.rstrip('/')}{original}"
    return f"{build_url(auth_service_url, '/login')}?{urlencode({'returnTo': return_to})}"


class TokenVerifier(ABC):
    """
    Contract:
        - verify() returns the Identity behind a token
        - Any invalid, expired or unverifiable token raises UnauthenticatedError
    """

    @abstractmethod
    async def verify(self, token: str) -> Identity:
        ...


class RemoteTokenVerifier(TokenVerifier):
    """Trusts the identity provider's /api/verify answer."""

    def __init__(self, http: httpx.AsyncClient, auth_service_url: str):
        self._http = http
        self.verify_url = build_url(auth_service_url, "/api/verify")

    async def verify(self, token: str) -> Identity:
        try:
            response = await self._http.get(
                self.verify_url, headers={"Authorization": f"Bearer {token}"}
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise UnauthenticatedError(
                context={"verify_status": e.response.status_code}
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Identity provider unreachable: %s", type(e).__name__)
            raise UnauthenticatedError(context={"error_type": type(e).__name__}) from e

        user = data.get("user") if isinstance(data, dict) else None
        if not isinstance(user, dict):
            raise UnauthenticatedError(context={"reason": "verify response without user"})
        subject = user.get("id") or user.get("email") or user.get("sub")
        return Identity(subject=str(subject or ""), claims=user)


class LocalTokenVerifier(TokenVerifier):
    """Checks the JWT signature locally; no network round trip."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    async def verify(self, token: str) -> Identity:
        if not self.secret:
            raise UnauthenticatedError(context={"reason": "no signing secret configured"})
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise UnauthenticatedError(context={"reason": "expired"}) from e
        except jwt.InvalidTokenError as e:
            raise UnauthenticatedError(context={"reason": type(e).__name__}) from e

        subject = claims.get("sub") or claims.get("email") or claims.get("id")
        return Identity(subject=str(subject or ""), claims=claims)


def build_verifier(settings: Settings, http: httpx.AsyncClient) -> TokenVerifier:
    if settings.auth_mode == "local":
        return LocalTokenVerifier(settings.auth_jwt_secret, settings.auth_jwt_algorithm)
    return RemoteTokenVerifier(http, settings.auth_service_url)
