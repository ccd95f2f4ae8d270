"""
Dashboard Aggregator — Response Schemas
=========================================

What:  Response models for the dashboard's own endpoints.
Why:   OpenAPI documentation and a consistent error format. Backend payloads
       (reminder lists, create/bulk results) are returned verbatim and have
       no model here.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Who the verified credential belongs to; lives for one request."""
    subject: str = Field(description="Stable identifier of the signed-in user")
    claims: Dict[str, Any] = Field(default_factory=dict)


class OverviewResponse(BaseModel):
    apps: Dict[str, Dict[str, Any]] = Field(
        description="Backend key → summary, or {\"error\": \"Failed to load\"}"
    )
    timestamp: int = Field(description="Server time in epoch milliseconds")


class ErrorResponse(BaseModel):
    """
    Error body returned by every handler.

    Example:
        {"error": "Reminder not found", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class UnauthenticatedResponse(BaseModel):
    error: str = Field(default="Not authenticated")
    loginUrl: str = Field(description="Identity provider login URL with returnTo")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'healthy' while the process serves requests")
    version: str
    backends: Dict[str, str] = Field(description="Configured backend key → base URL")
    uptime_seconds: float
