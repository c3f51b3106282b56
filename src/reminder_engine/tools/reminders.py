"""MCP tools for reminder CRUD operations.

Reminders are addressed by name: the first reminder whose title contains
the name (case-insensitively) wins, searching lists in order.
"""

from ..filters import ReminderFilter
from ..models import OperationResult, ReminderDetails, ReminderSection
from ..service import ReminderService
from ..utils import run_serialized


async def get_reminders(
    list_name: str | None = None,
    uncompleted_only: bool = False,
    priority: str | None = None,
    has_url: bool = False,
    has_alarms: bool = False,
) -> dict[str, list[ReminderSection]]:
    """Get reminders grouped by list.

    Results in each list are ordered: incomplete first, then by priority
    (high first, none last), then by due date, then by title.

    Args:
        list_name: Only show the first list whose title contains this (optional).
        uncompleted_only: Hide completed reminders (default False).
        priority: Only this priority: high/medium/low/none or 0-9 (optional).
        has_url: Only reminders with a URL (default False).
        has_alarms: Only reminders with alarms (default False).
    """
    service = ReminderService.get_instance()
    filters = ReminderFilter(
        uncompleted_only=uncompleted_only,
        priority=priority,
        has_url=has_url,
        has_alarms=has_alarms,
    )
    sections = await run_serialized(service.list_reminders, list_name, filters)
    return {"sections": sections}


async def show_reminder(name: str, list_name: str | None = None) -> ReminderDetails:
    """Show everything about one reminder.

    Includes priority level and symbol, whether it is overdue, its tags and
    any subtasks kept in its notes.

    Raises:
        NotFoundError: If no reminder matches the name.
    """
    service = ReminderService.get_instance()
    return await run_serialized(service.show, name, list_name)


async def create_reminder(
    name: str,
    list_name: str | None = None,
    due_date: str | None = None,
    start_date: str | None = None,
    notes: str | None = None,
    priority: str | None = None,
    url: str | None = None,
    alarm_minutes_before: int | None = None,
) -> OperationResult:
    """Create a new reminder.

    Any #tags in the name are moved to the end of the title.

    Args:
        name: Reminder title, may include #tags.
        list_name: Target list (default list, else the first list, if omitted).
        due_date: YYYY-MM-DD, MM/DD/YYYY, DD/MM/YYYY, "YYYY-MM-DD HH:MM",
            today, tomorrow, yesterday, or "in 3 days/weeks/months".
            03/04/2025 is read as March 4th.
        start_date: Same formats as due_date.
        notes: Optional notes.
        priority: high/medium/low/none or 0-9.
        url: URL to attach.
        alarm_minutes_before: Alarm this many minutes before the due date.

    Values that cannot be parsed are skipped and listed in ``ignored_fields``.
    """
    service = ReminderService.get_instance()
    return await run_serialized(
        service.create,
        name,
        list_name,
        due_date,
        start_date,
        notes,
        priority,
        url,
        alarm_minutes_before,
    )


async def update_reminder(
    name: str,
    list_name: str | None = None,
    new_title: str | None = None,
    new_priority: str | None = None,
    new_due_date: str | None = None,
    new_start_date: str | None = None,
    new_notes: str | None = None,
    new_url: str | None = None,
    move_to_list: str | None = None,
) -> OperationResult:
    """Update an existing reminder.

    Only provided fields will be updated; others remain unchanged.
    Use "remove" or "none" as the due/start date to clear it, and "remove"
    as the URL to clear it.

    Raises:
        NotFoundError: If no reminder matches the name.
    """
    service = ReminderService.get_instance()
    return await run_serialized(
        service.update,
        name,
        list_name,
        title=new_title,
        priority=new_priority,
        due_date=new_due_date,
        start_date=new_start_date,
        notes=new_notes,
        url=new_url,
        move_to_list=move_to_list,
    )


async def move_reminder(
    name: str, target_list: str, list_name: str | None = None
) -> OperationResult:
    """Move a reminder to a different list.

    Raises:
        NotFoundError: If the reminder or destination list doesn't exist.
    """
    service = ReminderService.get_instance()
    return await run_serialized(service.move, name, target_list, list_name)


__all__ = [
    "get_reminders",
    "show_reminder",
    "create_reminder",
    "update_reminder",
    "move_reminder",
]
