"""
Dashboard Aggregator — FastAPI Application Factory
====================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the shared httpx client, the backend registry and
       the services, registers middleware, exception handlers and routes.
Who:   uvicorn (`dashboard.main:app`), the CLI entry point and the tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────────────────────┐ │
    │  │  Req ID  │→│ Logging  │→│  Auth Gate           │ │
    │  └──────────┘ └──────────┘ └──────────────────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌───────────────┐ ┌────────────┐  │
    │  │ /api/overview│ │ /api/reminders│ │ /health    │  │
    │  └──────────────┘ └───────────────┘ └────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ Upstream→502  │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, validate configuration, log the registry
    Shutdown: close the shared httpx client (connection pool)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from dashboard import __version__
from dashboard.config import Settings, settings as default_settings
from dashboard.exceptions import (
    DashboardError,
    NotFoundError,
    UnauthenticatedError,
    UpstreamUnavailableError,
)
from dashboard.middleware.auth import AuthMiddleware
from dashboard.middleware.logging import RequestLoggingMiddleware
from dashboard.middleware.request_id import RequestIDMiddleware, request_id_var
from dashboard.routes import health, overview, reminders
from dashboard.services.aggregator import OverviewAggregator
from dashboard.services.auth import build_login_url, build_verifier
from dashboard.services.reminders_service import RemindersService
from dashboard.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """Configure the root logger once, before anything else logs."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # httpx logs every request URL at INFO, secret query parameter included
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI, config: Settings) -> None:
    """
    Handler hierarchy:
        RequestValidationError    → 400 (FastAPI body/query validation)
        UnauthenticatedError      → 401 {error, loginUrl}
        NotFoundError             → 404
        UpstreamUnavailableError  → 502 (generic message, details logged)
        DashboardError (base)     → 500
        Exception (fallback)      → 500

    Responses never carry upstream URLs, secrets or stack traces.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = _request_id(request)
        logger.warning("[%s] Invalid request: %s", rid, exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request",
                "details": jsonable_encoder(exc.errors()),
                "request_id": rid,
            },
        )

    @app.exception_handler(UnauthenticatedError)
    async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
        return JSONResponse(
            status_code=401,
            content={
                "error": exc.message,
                "loginUrl": build_login_url(request, config.auth_service_url, config.public_url),
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={"error": exc.message, "request_id": _request_id(request)},
        )

    @app.exception_handler(UpstreamUnavailableError)
    async def handle_upstream_unavailable(request: Request, exc: UpstreamUnavailableError):
        rid = _request_id(request)
        logger.error("[%s] Upstream failure: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=502,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(DashboardError)
    async def handle_dashboard_error(request: Request, exc: DashboardError):
        rid = _request_id(request)
        logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": "An internal error occurred", "request_id": rid},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred", "request_id": rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Assemble the application.

    Args:
        config:    Settings to use (defaults to the environment-loaded singleton)
        transport: httpx transport for every outbound call; tests pass an
                   httpx.MockTransport standing in for the backends and the
                   identity provider
    """
    config = config or default_settings
    backends = config.backend_registry()

    http = httpx.AsyncClient(
        timeout=httpx.Timeout(config.upstream_timeout),
        transport=transport,
    )
    upstream = UpstreamClient(http)
    verifier = build_verifier(config, http)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(config.log_level)
        logger.info("Dashboard %s starting up...", __version__)
        try:
            config.validate_required_for_production()
        except ValueError as e:
            # Keep serving: the overview degrades to error slots instead
            logger.error("Configuration error: %s", e)
        logger.info("Auth mode: %s via %s", config.auth_mode, config.auth_service_url)
        for key, backend in backends.items():
            logger.info("Backend %s → %s", key, backend.base_url)

        yield

        logger.info("Dashboard shutting down...")
        await http.aclose()

    app = FastAPI(
        title="Dashboard API",
        description="Aggregated overview of personal tool backends.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.backends = backends
    app.state.http_client = http
    app.state.aggregator = OverviewAggregator(upstream, backends)
    app.state.reminders_service = RemindersService(upstream, backends)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: CORS → RequestID → Logging → Auth → GZip
    # CORS wraps the gate so 401 responses stay readable cross-origin
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        AuthMiddleware,
        verifier=verifier,
        auth_service_url=config.auth_service_url,
        public_url=config.public_url,
        cookie_name=config.auth_cookie_name,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    if config.cors_origins_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )

    register_exception_handlers(app, config)

    app.include_router(overview.router)
    app.include_router(reminders.router)
    app.include_router(health.router)

    # Mounted last so it never shadows an API route
    static_dir = Path(config.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = create_app()
