"""
Dashboard Aggregator — Services Layer
=======================================

Service Inventory:
    - UpstreamClient: one authenticated call to one backend (httpx)
    - SummaryProvider table: per-backend overview card fetch + shaping
    - OverviewAggregator: concurrent fan-out with per-backend failure isolation
    - RemindersService: list / create / toggle proxy operations
    - TokenVerifier: remote or local validation of the inbound credential
"""
