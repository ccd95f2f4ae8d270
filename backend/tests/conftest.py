"""
Dashboard Aggregator — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every outbound call (backends and identity provider) goes through an
       httpx.MockTransport backed by FakeServices, so no test touches the
       network. Endpoint tests drive the ASGI app with httpx.AsyncClient.

Fixtures:
    ├── test_settings:  Settings pointing at *.test hosts
    ├── backends:       Backend registry built from test_settings
    ├── fake_services:  Routing table + request recorder for outbound calls
    ├── upstream:       UpstreamClient wired to fake_services
    └── client:         AsyncClient talking to a fresh app instance
"""

import json
import os
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the module-level app (imported by dashboard.main) off real hosts
os.environ.setdefault("REMINDERS_URL", "http://reminders.test")
os.environ.setdefault("REMINDERS_API_SECRET", "test-secret")
os.environ.setdefault("AUTH_SERVICE_URL", "http://auth.test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from dashboard.config import Settings  # noqa: E402
from dashboard.main import create_app  # noqa: E402
from dashboard.services.upstream import UpstreamClient  # noqa: E402

REMINDERS = "http://reminders.test"
CALENDAR = "http://calendar.test"
AUTH = "http://auth.test"
GOOD_TOKEN = "good-token"
AUTH_HEADERS = {"Authorization": f"Bearer {GOOD_TOKEN}"}


class FakeServices:
    """
    Stand-in for every upstream HTTP service.

    Routes are keyed by (method, "scheme://host/path"); the query string is
    ignored for matching but kept on the recorded request. A route is either
    a static (status, payload) pair, an exception to raise, or a callable
    taking the httpx.Request and returning an httpx.Response.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        url: str,
        payload: Any = None,
        status: int = 200,
        raises: Optional[Exception] = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> None:
        self.routes[(method, url)] = handler or raises or (status, payload)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, f"{request.url.scheme}://{request.url.host}{request.url.path}")
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"error": "no such route"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        status, payload = route
        return httpx.Response(status, json=payload)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)


def verify_handler(request: httpx.Request) -> httpx.Response:
    if request.headers.get("Authorization") == f"Bearer {GOOD_TOKEN}":
        return httpx.Response(200, json={"user": {"id": "user-1", "email": "me@example.com"}})
    return httpx.Response(401, json={"error": "Invalid token"})


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        public_url="https://dashboard.test",
        static_dir=str(tmp_path / "public"),
        auth_service_url=AUTH,
        auth_mode="remote",
        reminders_url=REMINDERS,
        reminders_api_secret="rem-secret",
        calendar_url=CALENDAR,
        calendar_api_secret="cal-secret",
        upstream_timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def auth_headers():
    return dict(AUTH_HEADERS)


@pytest.fixture
def backends(test_settings):
    return test_settings.backend_registry()


@pytest.fixture
def fake_services():
    fake = FakeServices()
    fake.add("GET", f"{AUTH}/api/verify", handler=verify_handler)
    return fake


@pytest_asyncio.fixture
async def upstream(fake_services):
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_services)) as http:
        yield UpstreamClient(http)


@pytest_asyncio.fixture
async def client(test_settings, fake_services):
    """
    HTTPX AsyncClient routed straight into a fresh app instance.

    Usage:
        async def test_overview(client):
            response = await client.get("/api/overview", headers=AUTH_HEADERS)
    """
    app = create_app(test_settings, transport=httpx.MockTransport(fake_services))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    await app.state.http_client.aclose()
