"""
Dashboard Aggregator — FastAPI Dependencies
=============================================

What:  Hands route handlers the services built by the app factory.
Why:   Services live on app.state (one per app instance), so tests can build
       an app around fake backends or override these with
       app.dependency_overrides.
"""

from fastapi import Request

from dashboard.exceptions import UnauthenticatedError
from dashboard.schemas.responses import Identity
from dashboard.services.aggregator import OverviewAggregator
from dashboard.services.reminders_service import RemindersService


def get_aggregator(request: Request) -> OverviewAggregator:
    return request.app.state.aggregator


def get_reminders_service(request: Request) -> RemindersService:
    return request.app.state.reminders_service


def get_identity(request: Request) -> Identity:
    """Identity attached by AuthMiddleware."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        # Only reachable if a gated route was mounted on an exempt path
        raise UnauthenticatedError(context={"path": request.url.path})
    return identity
