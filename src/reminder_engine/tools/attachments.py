"""MCP tools for alarms, location triggers, recurrence, tags and subtasks."""

from ..models import Frequency, LocationTrigger, OperationResult
from ..service import ReminderService
from ..utils import run_serialized


async def add_alarm(
    name: str,
    list_name: str | None = None,
    minutes_before: int | None = None,
    absolute_date: str | None = None,
) -> OperationResult:
    """Add an alarm to a reminder.

    Args:
        name: Reminder to change.
        list_name: Only search lists whose title contains this (optional).
        minutes_before: Minutes before the due date (e.g., 15, 60, 1440).
            Needs the reminder to have a due date.
        absolute_date: Fixed alarm time as "YYYY-MM-DD HH:MM".
    """
    service = ReminderService.get_instance()
    return await run_serialized(
        service.add_alarm, name, list_name, minutes_before, absolute_date
    )


async def remove_alarms(name: str, list_name: str | None = None) -> OperationResult:
    """Remove every alarm, including location triggers, from a reminder."""
    service = ReminderService.get_instance()
    return await run_serialized(service.remove_alarms, name, list_name)


async def add_location_trigger(
    name: str,
    location: LocationTrigger,
    list_name: str | None = None,
) -> OperationResult:
    """Make a reminder fire when arriving at or leaving a place.

    Provide title, optionally latitude and longitude, radius (meters) and
    proximity ("enter" or "leave").
    """
    service = ReminderService.get_instance()
    return await run_serialized(service.add_location, name, location, list_name)


async def remove_location_triggers(
    name: str, list_name: str | None = None
) -> OperationResult:
    """Remove the location triggers of a reminder, keeping time alarms."""
    service = ReminderService.get_instance()
    return await run_serialized(service.remove_location, name, list_name)


async def add_recurrence(
    name: str,
    frequency: Frequency,
    interval: int = 1,
    end_date: str | None = None,
    occurrence_count: int | None = None,
    list_name: str | None = None,
) -> OperationResult:
    """Make a reminder repeat.

    Args:
        name: Reminder to change.
        frequency: daily, weekly, monthly or yearly.
        interval: Repeat every N periods (default 1).
        end_date: Stop repeating after this date (optional).
        occurrence_count: Stop after this many occurrences (optional).
        list_name: Only search lists whose title contains this (optional).

    Without end_date or occurrence_count the reminder repeats forever.
    """
    service = ReminderService.get_instance()
    return await run_serialized(
        service.add_recurrence,
        name,
        frequency,
        interval,
        end_date,
        occurrence_count,
        list_name,
    )


async def remove_recurrence(name: str, list_name: str | None = None) -> OperationResult:
    """Stop a reminder from repeating."""
    service = ReminderService.get_instance()
    return await run_serialized(service.remove_recurrence, name, list_name)


async def add_tag(name: str, tag: str, list_name: str | None = None) -> OperationResult:
    """Append a #tag to a reminder's title unless it is already there."""
    service = ReminderService.get_instance()
    return await run_serialized(service.add_tag, name, tag, list_name)


async def add_subtask(
    name: str, text: str, list_name: str | None = None
) -> OperationResult:
    """Add a checkbox subtask to a reminder's notes."""
    service = ReminderService.get_instance()
    return await run_serialized(service.add_subtask, name, text, list_name)


__all__ = [
    "add_alarm",
    "remove_alarms",
    "add_location_trigger",
    "remove_location_triggers",
    "add_recurrence",
    "remove_recurrence",
    "add_tag",
    "add_subtask",
]
