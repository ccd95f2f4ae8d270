"""
Dashboard Aggregator — Schemas
================================

    - backends.py:  BackendDescriptor (static per-backend configuration)
    - reminders.py: request models of the reminder proxy endpoints
    - responses.py: Identity, overview, error and health responses
"""
