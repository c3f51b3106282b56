"""MCP tools for searching and summarizing reminders."""

from ..constants import DEFAULT_PAGINATION_LIMIT, DEFAULT_PAGINATION_OFFSET
from ..filters import ReminderFilter
from ..models import Reminder, ReminderStats, TagCount
from ..service import ReminderService
from ..utils import run_serialized


async def search_reminders(
    query: str | None = None,
    list_name: str | None = None,
    priority: str | None = None,
    tag: str | None = None,
    has_url: bool = False,
    has_notes: bool = False,
    has_alarms: bool = False,
    due_before: str | None = None,
    due_after: str | None = None,
    overdue: bool = False,
    completed: bool = False,
    uncompleted: bool = False,
    limit: int | None = DEFAULT_PAGINATION_LIMIT,
    offset: int = DEFAULT_PAGINATION_OFFSET,
) -> dict[str, list[Reminder]]:
    """Search reminders across lists with combinable filters.

    Every filter given must match. Dates accept the same formats as
    create_reminder; a filter value that cannot be parsed is ignored.

    Args:
        query: Text searched case-insensitively in titles and notes (optional).
        list_name: Only lists whose title contains this (optional).
        priority: high/medium/low/none or 0-9 (optional).
        tag: Only reminders tagged with this, with or without '#' (optional).
        has_url: Only reminders with a URL.
        has_notes: Only reminders with notes.
        has_alarms: Only reminders with alarms.
        due_before: Due strictly before this date (optional).
        due_after: Due strictly after this date (optional).
        overdue: Only open reminders whose due date has passed.
        completed: Only completed reminders.
        uncompleted: Only open reminders.
        limit: Maximum number of results to return.
        offset: Number of results to skip for pagination.
    """
    service = ReminderService.get_instance()
    filters = ReminderFilter(
        query=query,
        priority=priority,
        tag=tag,
        has_url=has_url,
        has_notes=has_notes,
        has_alarms=has_alarms,
        due_before=due_before,
        due_after=due_after,
        overdue=overdue,
        completed_only=completed,
        uncompleted_only=uncompleted,
    )
    results = await run_serialized(service.search, filters, list_name, limit, offset)
    return {"reminders": results}


async def reminder_stats(list_name: str | None = None) -> ReminderStats:
    """Counts, completion rate, priority distribution and upcoming due dates.

    Args:
        list_name: Only lists whose title contains this (optional).
    """
    service = ReminderService.get_instance()
    return await run_serialized(service.stats, list_name)


async def list_tags(list_name: str | None = None) -> dict[str, list[TagCount]]:
    """Every #tag in use, with how many reminders carry it, most used first."""
    service = ReminderService.get_instance()
    tags = await run_serialized(service.tags, list_name)
    return {"tags": tags}


__all__ = ["search_reminders", "reminder_stats", "list_tags"]
