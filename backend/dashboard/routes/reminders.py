"""
Dashboard Aggregator — Reminder Proxy Routes
==============================================

What:  GET  /api/reminders                list with filters
       POST /api/reminders                quick-add
       POST /api/reminders/{id}/complete  toggle completion
How:   Thin handlers over RemindersService; backend JSON is returned verbatim.

Error responses (global exception handlers):
    400: invalid body (blank title)
    404: {"error": "Reminder not found"} on toggle of an unknown id
    502: backend unreachable or failing
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from dashboard.dependencies import get_reminders_service
from dashboard.schemas.reminders import ReminderCreate, ReminderFilters
from dashboard.schemas.responses import ErrorResponse
from dashboard.services.reminders_service import RemindersService

router = APIRouter(prefix="/api/reminders", tags=["Reminders"])


@router.get(
    "",
    responses={502: {"description": "Reminders backend failed", "model": ErrorResponse}},
    summary="List reminders (pass-through of the backend's filtered list)",
)
async def list_reminders(
    folder: Optional[str] = Query(default=None),
    completed: Optional[str] = Query(default=None, description="Forwarded as given"),
    today: Optional[str] = Query(default=None, description="Any truthy value limits to today"),
    tag: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    service: RemindersService = Depends(get_reminders_service),
) -> Any:
    filters = ReminderFilters(
        folder=folder, completed=completed, today=today, tag=tag, search=search
    )
    return await service.list_reminders(filters)


@router.post(
    "",
    responses={
        400: {"description": "Invalid reminder", "model": ErrorResponse},
        502: {"description": "Reminders backend failed", "model": ErrorResponse},
    },
    summary="Create a reminder",
)
async def create_reminder(
    reminder: ReminderCreate,
    service: RemindersService = Depends(get_reminders_service),
) -> Any:
    return await service.create_reminder(reminder)


@router.post(
    "/{reminder_id}/complete",
    responses={
        404: {"description": "Reminder not found", "model": ErrorResponse},
        502: {"description": "Reminders backend failed", "model": ErrorResponse},
    },
    summary="Toggle a reminder's completion state",
)
async def toggle_reminder(
    reminder_id: str,
    service: RemindersService = Depends(get_reminders_service),
) -> Any:
    return await service.toggle_completion(reminder_id)
