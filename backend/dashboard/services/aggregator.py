"""
Dashboard Aggregator — Overview Aggregator
============================================

What:  Builds the overview payload covering every configured backend.
How:   Runs each backend's summary provider concurrently; a provider that
       raises fills only its own slot with ERROR_MARKER.
Who:   Called by GET /api/overview.

Guarantees:
    - Exactly one entry per configured backend in `apps`
    - One backend's failure never touches another slot or the response status
    - `timestamp` is epoch milliseconds, taken when aggregation starts

Orchestration:
    ┌──────────────┐
    │  overview()  │──┬──▶ reminders: today + stats  ──▶ summary | error
    └──────────────┘  └──▶ calendar:  upcoming + stats ──▶ summary | error
                            (asyncio.gather, no ordering between slots)
"""

import asyncio
import logging
import time
from typing import Any, Dict, Mapping, Optional

from dashboard.schemas.backends import BackendDescriptor
from dashboard.services.summaries import SUMMARY_PROVIDERS, SummaryProvider
from dashboard.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)

ERROR_MARKER = {"error": "Failed to load"}


class OverviewAggregator:

    def __init__(
        self,
        upstream: UpstreamClient,
        backends: Mapping[str, BackendDescriptor],
        providers: Optional[Mapping[str, SummaryProvider]] = None,
    ):
        self.upstream = upstream
        self.backends = backends
        self.providers = SUMMARY_PROVIDERS if providers is None else providers

    async def overview(self) -> Dict[str, Any]:
        timestamp = int(time.time() * 1000)
        keys = list(self.backends)
        results = await asyncio.gather(*(self._collect(key) for key in keys))
        return {"apps": dict(zip(keys, results)), "timestamp": timestamp}

    async def _collect(self, key: str) -> Dict[str, Any]:
        """Fetch one backend's summary; any failure becomes the error marker."""
        provider = self.providers.get(key)
        if provider is None:
            logger.error("No summary provider registered for backend '%s'", key)
            return dict(ERROR_MARKER)
        try:
            return await provider.fetch_summary(self.upstream, self.backends[key])
        except Exception as e:
            logger.warning("Failed to fetch %s summary: %s", key, e)
            return dict(ERROR_MARKER)
