"""
Dashboard Aggregator — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for the failure modes of the dashboard.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       JSON responses; context is logged server-side only.
Who:   Raised by the auth gate, the upstream client and the services.

Exception Hierarchy:
    DashboardError (base)
    ├── UnauthenticatedError      → 401 JSON / 302 redirect (auth gate only)
    ├── NotFoundError             → 404 Not Found
    └── UpstreamUnavailableError  → 502 Bad Gateway (proxy routes only;
                                    the aggregator downgrades it to an
                                    error slot)
"""

from typing import Any, Dict, Optional


class DashboardError(Exception):
    """
    Base exception for all dashboard errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthenticatedError(DashboardError):
    """
    Raised when the inbound credential is missing or fails validation.

    Never reaches a route handler: the auth middleware converts it into a
    401 payload (API paths) or a redirect to the login page (everything else).
    """

    def __init__(
        self,
        message: str = "Not authenticated",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(DashboardError):
    """
    Raised when a referenced item does not exist upstream.

    When:  Toggling completion of a reminder id that is not in the backend's list.
    HTTP:  404 Not Found, body {"error": "<Resource> not found"}
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource.capitalize()} not found", context=ctx)
        self.resource_id = resource_id


class UpstreamUnavailableError(DashboardError):
    """
    Raised when a backend call fails: network error, timeout, non-2xx status
    or a body that is not JSON.

    Attributes:
        backend:      Registry key of the backend that failed
        status_code:  Upstream HTTP status, None for transport failures
    """

    def __init__(
        self,
        backend: str,
        message: str = "Upstream service is unavailable",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["backend"] = backend
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.backend = backend
        self.status_code = status_code
