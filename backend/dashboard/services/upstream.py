"""
Dashboard Aggregator — Upstream Client
========================================

What:  Performs one authenticated HTTP call to a named backend.
How:   Joins the backend's base URL and the request path, appends the shared
       secret as the `secret` query parameter (and injects it into JSON bodies,
       the write convention of the Reminders backend), issues the request on
       a shared httpx.AsyncClient and returns the parsed JSON.
Who:   Used by the summary providers and the reminders service.

Failure contract:
    Every failure mode (connect error, timeout, non-2xx, non-JSON body) is
    raised as UpstreamUnavailableError. Callers decide what that means:
    the aggregator fills an error slot, proxy routes answer 502.
    There are no retries: one failed call is one failure.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from dashboard.exceptions import UpstreamUnavailableError
from dashboard.schemas.backends import BackendDescriptor

logger = logging.getLogger(__name__)


def build_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class UpstreamClient:
    """
    Thin wrapper around a shared httpx.AsyncClient.

    The AsyncClient (connection pool + timeout) is owned by the application
    and closed on shutdown; this class never closes it.
    """

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def request(
        self,
        backend: BackendDescriptor,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Call `path` on `backend` and return the decoded JSON body.

        Args:
            backend: Descriptor of the target service
            method:  HTTP method ("GET", "POST", ...)
            path:    Path relative to the backend's base URL
            params:  Query parameters; None values are dropped
            json:    Optional JSON body

        Raises:
            UpstreamUnavailableError: on any transport, status or decoding failure
        """
        url = build_url(backend.base_url, path)
        query = {k: v for k, v in (params or {}).items() if v is not None}
        body = None
        # No secret configured: the call goes out unauthenticated
        if backend.shared_secret:
            query["secret"] = backend.shared_secret
        if json is not None:
            body = dict(json)
            if backend.shared_secret:
                body = {"secret": backend.shared_secret, **body}

        try:
            response = await self._http.request(method, url, params=query, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("%s %s %s → HTTP %d", backend.key, method, path, status)
            raise UpstreamUnavailableError(
                backend=backend.key,
                message=f"{backend.name} responded with HTTP {status}",
                status_code=status,
                context={"path": path},
            ) from e
        except httpx.HTTPError as e:
            logger.warning("%s %s %s failed: %s", backend.key, method, path, type(e).__name__)
            raise UpstreamUnavailableError(
                backend=backend.key,
                message=f"{backend.name} is unreachable",
                context={"path": path, "error_type": type(e).__name__},
            ) from e

        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s %s %s returned a non-JSON body", backend.key, method, path)
            raise UpstreamUnavailableError(
                backend=backend.key,
                message=f"{backend.name} returned an invalid response",
                status_code=response.status_code,
                context={"path": path},
            ) from e

    async def get(
        self,
        backend: BackendDescriptor,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return await self.request(backend, "GET", path, params=params)

    async def post(
        self,
        backend: BackendDescriptor,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return await self.request(backend, "POST", path, json=json)
