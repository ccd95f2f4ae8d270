"""
Dashboard Aggregator — Middleware Package
===========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Auth Gate] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line (including rejections) carries it
    2. Logging: captures the final status, including 401s and redirects
    3. Auth Gate: nothing behind it runs for an unauthenticated request
"""
