"""
Dashboard Aggregator — API Routes Package
===========================================

Route Inventory:
    - overview.py:   GET  /api/overview
                     GET  /api/me
    - reminders.py:  GET  /api/reminders
                     POST /api/reminders
                     POST /api/reminders/{id}/complete
    - health.py:     GET  /health            (not gated)

Routes stay thin: they read the request, call a service and return its
result. Upstream calls and response shaping live in services/.
"""
