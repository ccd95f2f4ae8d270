"""
Dashboard Aggregator — Reminders Proxy Service
================================================

What:  Maps the dashboard's reminder operations onto the Reminders backend's
       external API.
Who:   Called by the /api/reminders route handlers.

Backend endpoints used:
    GET  /api/external/reminders   filtered or full list
    POST /api/external/reminder    create one reminder
    POST /api/external/bulk        {action, ids} — the only mutation primitive

Toggle completion:
    The backend has no single-item update, so a toggle is synthesized from a
    read (full list, locate the item) plus a bulk write with the inverse
    action. Two concurrent toggles of the same id can both read the same
    state and both write the same action; the last write wins. Accepted:
    the backend offers nothing to make this atomic.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from dashboard.exceptions import NotFoundError, UpstreamUnavailableError
from dashboard.schemas.backends import BackendDescriptor
from dashboard.schemas.reminders import ReminderCreate, ReminderFilters
from dashboard.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)

REMINDERS_PATH = "/api/external/reminders"
CREATE_PATH = "/api/external/reminder"
BULK_PATH = "/api/external/bulk"


def _relabel(error: UpstreamUnavailableError, message: str) -> UpstreamUnavailableError:
    """Same failure, with the message the dashboard client is shown."""
    return UpstreamUnavailableError(
        backend=error.backend,
        message=message,
        status_code=error.status_code,
        context={**error.context, "upstream_message": error.message},
    )


class RemindersService:

    def __init__(self, upstream: UpstreamClient, backends: Mapping[str, BackendDescriptor]):
        self.upstream = upstream
        self.backends = backends

    @property
    def backend(self) -> BackendDescriptor:
        try:
            return self.backends["reminders"]
        except KeyError:
            raise UpstreamUnavailableError(
                backend="reminders", message="Reminders backend is not configured"
            ) from None

    async def list_reminders(self, filters: Optional[ReminderFilters] = None) -> Any:
        """Pass-through of the backend's filtered list."""
        params = filters.to_params() if filters else {}
        try:
            return await self.upstream.get(self.backend, REMINDERS_PATH, params=params)
        except UpstreamUnavailableError as e:
            raise _relabel(e, "Failed to fetch reminders") from e

    async def create_reminder(self, reminder: ReminderCreate) -> Any:
        """Forward a new reminder; returns the backend's response verbatim."""
        payload = {
            "title": reminder.title,
            "notes": reminder.notes,
            "priority": reminder.priority,
        }
        try:
            return await self.upstream.post(self.backend, CREATE_PATH, json=payload)
        except UpstreamUnavailableError as e:
            raise _relabel(e, "Failed to create reminder") from e

    async def toggle_completion(self, reminder_id: str) -> Any:
        """
        Flip the completion state of one reminder.

        Raises:
            NotFoundError: the id is not in the backend's list (no write issued)
            UpstreamUnavailableError: either backend call failed
        """
        try:
            data = await self.upstream.get(self.backend, REMINDERS_PATH)
            reminder = self._find(data, reminder_id)
            if reminder is None:
                raise NotFoundError(resource="reminder", resource_id=reminder_id)

            action = "uncomplete" if reminder.get("completed") else "complete"
            logger.info("Toggling reminder %s: %s", reminder_id, action)
            return await self.upstream.post(
                self.backend, BULK_PATH, json={"action": action, "ids": [reminder["id"]]}
            )
        except UpstreamUnavailableError as e:
            raise _relabel(e, "Failed to update reminder") from e

    @staticmethod
    def _find(data: Any, reminder_id: str) -> Optional[Dict[str, Any]]:
        reminders = data.get("reminders") if isinstance(data, dict) else None
        for item in reminders or []:
            if isinstance(item, dict) and str(item.get("id")) == reminder_id:
                return item
        return None
