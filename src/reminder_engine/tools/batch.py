"""MCP tools for batch reminder operations."""

from ..models import BatchResult
from ..service import ReminderService
from ..utils import run_serialized


async def complete_reminders(
    names: list[str], list_name: str | None = None
) -> BatchResult:
    """Mark multiple reminders as complete.

    Processes each name in order, capturing any failures. Partial success
    is possible - earlier reminders stay completed if a later one fails.
    Already-completed reminders count as successes.
    """
    service = ReminderService.get_instance()
    return await run_serialized(service.complete, names, list_name)


async def delete_reminders(names: list[str], list_name: str | None = None) -> BatchResult:
    """Delete multiple reminders.

    Processes each name in order, capturing any failures. Deletion cannot
    be undone.
    """
    service = ReminderService.get_instance()
    return await run_serialized(service.delete, names, list_name)


async def add_reminders(
    list_name: str | None,
    items: list[str],
) -> BatchResult:
    """Quick-add multiple reminders by title, all in the same list.

    Useful for quickly adding a batch of items like a shopping list.
    A failure on one item does not stop the others.
    """
    service = ReminderService.get_instance()
    return await run_serialized(service.create_many, items, list_name)


__all__ = [
    "complete_reminders",
    "delete_reminders",
    "add_reminders",
]
