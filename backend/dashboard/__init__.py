"""
Dashboard Aggregator — Application Package
============================================

What: One HTTP server that signs the user in, gathers summaries from the
      personal-tool backends (Reminders, Calendar, ...) and proxies a few
      reminder operations.
Who:  Imported by uvicorn (`dashboard.main:app`), the CLI entry point and pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │     Middleware (Request ID, Auth)   │  ← identity attached per request
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (Aggregator, Reminders)   │  ← orchestration, shaping
    ├─────────────────────────────────────┤
    │        Upstream Client (httpx)      │  ← one call to one backend
    └─────────────────────────────────────┘

    Nothing is persisted: every layer works on transient request data.
"""

__version__ = "1.0.0"
