"""
Dashboard Aggregator — Reminders Service Unit Tests
=====================================================

What we test:
    ✅ Toggle picks the inverse action of the current `completed` flag
    ✅ Toggle of an unknown id raises NotFoundError and never writes
    ✅ Create fills notes/priority defaults and injects the secret
    ✅ List forwards only the filters that were given
    ✅ Upstream failures carry the dashboard-facing message
"""

import pytest

from dashboard.exceptions import NotFoundError, UpstreamUnavailableError
from dashboard.schemas.reminders import ReminderCreate, ReminderFilters
from dashboard.services.reminders_service import RemindersService

REMINDERS = "http://reminders.test"


@pytest.fixture
def service(upstream, backends):
    return RemindersService(upstream, backends)


@pytest.fixture
def reminder_list(fake_services):
    fake_services.add(
        "GET",
        f"{REMINDERS}/api/external/reminders",
        {
            "reminders": [
                {"id": "open-1", "title": "Call mom", "completed": False},
                {"id": "done-1", "title": "Pay rent", "completed": True},
                {"id": 42, "title": "Numeric id", "completed": False},
            ]
        },
    )
    fake_services.add(
        "POST", f"{REMINDERS}/api/external/bulk", {"success": True, "updated": 1}
    )


class TestToggleCompletion:

    @pytest.mark.asyncio
    async def test_incomplete_item_is_completed(self, service, fake_services, reminder_list):
        result = await service.toggle_completion("open-1")

        assert result == {"success": True, "updated": 1}
        (bulk,) = fake_services.calls("POST", "/api/external/bulk")
        assert fake_services.body(bulk) == {
            "secret": "rem-secret",
            "action": "complete",
            "ids": ["open-1"],
        }

    @pytest.mark.asyncio
    async def test_completed_item_is_uncompleted(self, service, fake_services, reminder_list):
        await service.toggle_completion("done-1")

        (bulk,) = fake_services.calls("POST", "/api/external/bulk")
        assert fake_services.body(bulk)["action"] == "uncomplete"

    @pytest.mark.asyncio
    async def test_read_uses_full_list(self, service, fake_services, reminder_list):
        await service.toggle_completion("open-1")

        (read,) = fake_services.calls("GET", "/api/external/reminders")
        assert "today" not in read.url.params

    @pytest.mark.asyncio
    async def test_numeric_backend_id_matches_path_id(self, service, fake_services, reminder_list):
        await service.toggle_completion("42")

        (bulk,) = fake_services.calls("POST", "/api/external/bulk")
        assert fake_services.body(bulk)["ids"] == [42]

    @pytest.mark.asyncio
    async def test_unknown_id_raises_without_write(self, service, fake_services, reminder_list):
        with pytest.raises(NotFoundError) as exc_info:
            await service.toggle_completion("missing")

        assert exc_info.value.message == "Reminder not found"
        assert fake_services.calls("POST", "/api/external/bulk") == []

    @pytest.mark.asyncio
    async def test_list_without_reminders_key(self, service, fake_services):
        fake_services.add("GET", f"{REMINDERS}/api/external/reminders", {"count": 0})

        with pytest.raises(NotFoundError):
            await service.toggle_completion("open-1")

    @pytest.mark.asyncio
    async def test_bulk_failure_is_update_error(self, service, fake_services, reminder_list):
        fake_services.add("POST", f"{REMINDERS}/api/external/bulk", {}, status=500)

        with pytest.raises(UpstreamUnavailableError, match="Failed to update reminder"):
            await service.toggle_completion("open-1")


class TestCreateReminder:

    @pytest.mark.asyncio
    async def test_defaults_are_filled(self, service, fake_services):
        fake_services.add(
            "POST", f"{REMINDERS}/api/external/reminder", {"success": True, "id": "new-1"}
        )

        result = await service.create_reminder(ReminderCreate(title="Buy milk"))

        assert result == {"success": True, "id": "new-1"}
        (request,) = fake_services.calls("POST", "/api/external/reminder")
        assert fake_services.body(request) == {
            "secret": "rem-secret",
            "title": "Buy milk",
            "notes": "",
            "priority": "normal",
        }

    @pytest.mark.asyncio
    async def test_given_fields_are_forwarded(self, service, fake_services):
        fake_services.add("POST", f"{REMINDERS}/api/external/reminder", {"success": True})

        await service.create_reminder(
            ReminderCreate(title="Dentist", notes="Bring card", priority="high")
        )

        (request,) = fake_services.calls("POST", "/api/external/reminder")
        body = fake_services.body(request)
        assert body["notes"] == "Bring card"
        assert body["priority"] == "high"

    @pytest.mark.asyncio
    async def test_failure_is_create_error(self, service, fake_services):
        fake_services.add("POST", f"{REMINDERS}/api/external/reminder", {}, status=502)

        with pytest.raises(UpstreamUnavailableError, match="Failed to create reminder"):
            await service.create_reminder(ReminderCreate(title="Buy milk"))


class TestListReminders:

    @pytest.mark.asyncio
    async def test_filters_are_forwarded(self, service, fake_services):
        fake_services.add("GET", f"{REMINDERS}/api/external/reminders", {"reminders": []})

        await service.list_reminders(
            ReminderFilters(folder="Home", completed="false", today="1", search="milk")
        )

        (request,) = fake_services.calls("GET", "/api/external/reminders")
        params = request.url.params
        assert params["folder"] == "Home"
        assert params["completed"] == "false"
        assert params["today"] == "true"
        assert params["search"] == "milk"
        assert "tag" not in params

    @pytest.mark.asyncio
    async def test_result_is_passed_through(self, service, fake_services):
        payload = {"reminders": [{"id": "x", "extra": {"nested": True}}], "count": 1}
        fake_services.add("GET", f"{REMINDERS}/api/external/reminders", payload)

        assert await service.list_reminders() == payload

    @pytest.mark.asyncio
    async def test_unconfigured_backend(self, upstream):
        service = RemindersService(upstream, {})

        with pytest.raises(UpstreamUnavailableError, match="Failed to fetch reminders"):
            await service.list_reminders()


class TestReminderSchemas:

    def test_blank_title_rejected(self):
        with pytest.raises(ValueError):
            ReminderCreate(title="   ")

    def test_null_optional_fields_fall_back(self):
        reminder = ReminderCreate(title="x", notes=None, priority=None)
        assert reminder.notes == ""
        assert reminder.priority == "normal"

    def test_false_today_is_not_forwarded(self):
        assert "today" not in ReminderFilters(today="false").to_params()
