"""
Dashboard Aggregator — Per-Backend Summary Providers
======================================================

What:  One provider per backend kind, each knowing which calls make up that
       backend's overview card and how to shape the responses.
Why:   The aggregator iterates a uniform capability (`fetch_summary`) instead
       of special-casing each backend inline.
How:   Concrete providers subclass SummaryProvider; SUMMARY_PROVIDERS maps the
       registry key to the provider instance.

Summary schemas:
    reminders: {name, icon, color, todayCount, total, incomplete, overdue,
                highPriority, items}
    calendar:  {name, icon, color, upcomingCount, total, today, thisWeek, items}

    `items` is always a preview capped at PREVIEW_LIMIT entries.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from dashboard.schemas.backends import BackendDescriptor
from dashboard.services.upstream import UpstreamClient

PREVIEW_LIMIT = 5


def _preview(items: Any) -> List[Any]:
    if not isinstance(items, list):
        return []
    return items[:PREVIEW_LIMIT]


def _stats(payload: Dict[str, Any]) -> Dict[str, Any]:
    stats = payload.get("stats")
    return stats if isinstance(stats, dict) else {}


class SummaryProvider(ABC):
    """
    Contract:
        - fetch_summary() returns the backend's summary dict
        - Any exception means "this backend failed"; the aggregator handles it
    """

    @abstractmethod
    async def fetch_summary(
        self, upstream: UpstreamClient, backend: BackendDescriptor
    ) -> Dict[str, Any]:
        ...


class RemindersSummary(SummaryProvider):
    """Today's reminders plus the backend's counters."""

    async def fetch_summary(self, upstream, backend):
        today, stats = await asyncio.gather(
            upstream.get(backend, "/api/external/reminders", params={"today": "true"}),
            upstream.get(backend, "/api/external/stats"),
        )
        counters = _stats(stats)
        return {
            **backend.display(),
            "todayCount": today.get("count") or 0,
            "total": counters.get("total") or 0,
            "incomplete": counters.get("incomplete") or 0,
            "overdue": counters.get("overdue") or 0,
            "highPriority": counters.get("highPriority") or 0,
            "items": _preview(today.get("reminders")),
        }


class CalendarSummary(SummaryProvider):
    """Upcoming events plus the backend's counters."""

    async def fetch_summary(self, upstream, backend):
        upcoming, stats = await asyncio.gather(
            upstream.get(backend, "/api/external/events", params={"upcoming": "true"}),
            upstream.get(backend, "/api/external/stats"),
        )
        counters = _stats(stats)
        return {
            **backend.display(),
            "upcomingCount": upcoming.get("count") or 0,
            "total": counters.get("total") or 0,
            "today": counters.get("today") or 0,
            "thisWeek": counters.get("thisWeek") or 0,
            "items": _preview(upcoming.get("events")),
        }


SUMMARY_PROVIDERS: Dict[str, SummaryProvider] = {
    "reminders": RemindersSummary(),
    "calendar": CalendarSummary(),
}
