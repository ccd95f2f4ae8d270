"""
Dashboard Aggregator — Application Configuration
==================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the CLI entry point and the tests.
When:  Loaded once at module import time; validated before the app starts.

Backend Registry:
    Each upstream service is described by a BackendDescriptor built from the
    per-backend URL/secret settings. `backend_registry()` returns a read-only
    mapping; services receive it at construction time and never mutate it.
    A backend whose URL is empty is simply not part of the registry.
"""

from types import MappingProxyType
from typing import List, Literal, Mapping

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from dashboard.schemas.backends import BackendDescriptor


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Defaults are suitable for local development. Production deployments
    must set the shared secrets (REMINDERS_API_SECRET, and AUTH_JWT_SECRET
    when AUTH_MODE=local).
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    # What: Externally visible base URL of this dashboard
    # Used to build the `returnTo` parameter sent to the identity provider
    public_url: str = Field(default="http://localhost:8080")

    # What: Directory of static files served at "/" (skipped if missing)
    static_dir: str = Field(default="public")

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Identity Provider ─────────────────────────────────────────────────
    auth_service_url: str = Field(default="http://localhost:9000")
    auth_cookie_name: str = Field(default="auth_session")

    # What: How inbound tokens are validated
    # remote: ask the identity provider's /api/verify endpoint
    # local:  check the JWT signature with auth_jwt_secret
    auth_mode: Literal["remote", "local"] = Field(default="remote")
    auth_jwt_secret: str = Field(default="")
    auth_jwt_algorithm: str = Field(default="HS256")

    # ── Upstream Backends ─────────────────────────────────────────────────
    reminders_url: str = Field(default="http://localhost:3001")
    # Empty means backend calls carry no `secret`; startup validation
    # logs it as a configuration error
    reminders_api_secret: str = Field(default="")

    # Optional: empty URL keeps the calendar out of the registry
    calendar_url: str = Field(default="")
    calendar_api_secret: str = Field(default="")

    # What: Timeout (seconds) applied to every outbound call
    # Why:  A slow backend must not stall the whole overview response
    upstream_timeout: float = Field(default=10.0, gt=0, le=120)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated; empty disables the CORS middleware entirely
    cors_origins: str = Field(default="")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def backend_registry(self) -> Mapping[str, BackendDescriptor]:
        """Build the immutable key → BackendDescriptor mapping."""
        backends = {}
        if self.reminders_url:
            backends["reminders"] = BackendDescriptor(
                key="reminders",
                name="Reminders",
                base_url=self.reminders_url,
                shared_secret=self.reminders_api_secret or None,
                icon="✅",
                color="#007AFF",
            )
        if self.calendar_url:
            backends["calendar"] = BackendDescriptor(
                key="calendar",
                name="Calendar",
                base_url=self.calendar_url,
                shared_secret=self.calendar_api_secret or None,
                icon="📅",
                color="#FF9500",
            )
        return MappingProxyType(backends)

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if self.reminders_url and not self.reminders_api_secret:
            errors.append("REMINDERS_API_SECRET is not set.")
        if self.calendar_url and not self.calendar_api_secret:
            errors.append("CALENDAR_API_SECRET is not set.")
        if self.auth_mode == "local" and not self.auth_jwt_secret:
            errors.append("AUTH_JWT_SECRET is required when AUTH_MODE=local.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
