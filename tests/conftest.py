"""Pytest configuration and fixtures for reminder engine tests."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reminder_engine.clock import FixedClock  # noqa: E402
from reminder_engine.models import ReminderList, Reminder  # noqa: E402
from reminder_engine.repository import InMemoryRepository  # noqa: E402
from reminder_engine.service import ReminderService  # noqa: E402

# Wednesday, mid-morning
NOW = datetime(2025, 1, 15, 10, 30)


@pytest.fixture
def clock() -> FixedClock:
    """A clock frozen at NOW."""
    return FixedClock(NOW)


@pytest.fixture
def inbox() -> ReminderList:
    return ReminderList(id="inbox", title="Inbox", is_default=True)


@pytest.fixture
def work() -> ReminderList:
    return ReminderList(id="work", title="Work", color="#00F")


@pytest.fixture
def shopping() -> ReminderList:
    return ReminderList(id="shopping", title="Shopping")


@pytest.fixture
def make_reminder(inbox):
    """Build unsaved reminders with sensible defaults."""

    def factory(title: str = "Task", **fields) -> Reminder:
        fields.setdefault("reminder_list", inbox)
        return Reminder(title=title, **fields)

    return factory


@pytest.fixture
def repository(clock, inbox, work, shopping) -> InMemoryRepository:
    """Three lists, enumerated Work, Inbox, Shopping, with a few reminders."""
    return InMemoryRepository(
        lists=[work, inbox, shopping],
        reminders=[
            Reminder(title="Write report #work", reminder_list=work, priority=1,
                     due_date=datetime(2025, 1, 20)),
            Reminder(title="Review PR", reminder_list=work, priority=5,
                     due_date=datetime(2025, 1, 10)),
            Reminder(title="Call mom", reminder_list=inbox,
                     notes="Ask about the weekend #family"),
            Reminder(title="Pay rent", reminder_list=inbox, is_completed=True,
                     completion_date=datetime(2025, 1, 1, 9, 0),
                     due_date=datetime(2025, 1, 1)),
            Reminder(title="Buy milk #groceries", reminder_list=shopping,
                     url="https://example.com/milk", due_date=datetime(2025, 1, 15)),
        ],
        clock=clock,
    )


@pytest.fixture
def service(repository, clock) -> ReminderService:
    return ReminderService(repository, clock)


@pytest.fixture
def installed_service(service):
    """Make ``service`` the process-wide instance used by the MCP tools."""
    ReminderService.set_instance(service)
    yield service
    ReminderService.set_instance(None)
