"""
Dashboard Aggregator — Reminder Request Schemas
=================================================

What:  Pydantic models for the reminder proxy endpoints.
Why:   The dashboard validates what it forwards; reminder records coming
       back from the backend are passed through untouched.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

FALSY = {"false", "0", "no", "off"}


class ReminderCreate(BaseModel):
    """
    Body of POST /api/reminders.

    Omitted (or null) notes/priority fall back to "" and "normal", which is
    what the backend receives.
    """
    title: str = Field(min_length=1, max_length=500, description="Reminder title")
    notes: Optional[str] = Field(default="", max_length=5000)
    priority: Optional[str] = Field(default="normal", max_length=32)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title must not be blank")
        return v

    @field_validator("notes")
    @classmethod
    def default_notes(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("priority")
    @classmethod
    def default_priority(cls, v: Optional[str]) -> str:
        return v or "normal"


class ReminderFilters(BaseModel):
    """Query filters of GET /api/reminders, forwarded to the backend."""
    folder: Optional[str] = None
    completed: Optional[str] = None
    today: Optional[str] = None
    tag: Optional[str] = None
    search: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.folder:
            params["folder"] = self.folder
        if self.completed is not None:
            params["completed"] = self.completed
        if self.today and self.today.lower() not in FALSY:
            params["today"] = "true"
        if self.tag:
            params["tag"] = self.tag
        if self.search:
            params["search"] = self.search
        return params
