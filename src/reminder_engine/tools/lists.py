"""MCP tools for reminder list management."""

from ..models import ListSummary, ReminderList
from ..service import ReminderService
from ..utils import run_serialized


async def list_reminder_lists() -> dict[str, list[ListSummary]]:
    """Get all reminder lists with their reminder counts.

    Lists are sorted by title. Each entry includes the list's ID, title,
    color, account and whether it is the default list, plus how many of its
    reminders are completed out of the total.
    """
    service = ReminderService.get_instance()
    lists = await run_serialized(service.list_lists)
    # Wrap in dict to ensure FastMCP always returns a TextContent
    # (empty lists cause "No result received" in Claude Desktop)
    return {"lists": lists}


async def create_reminder_list(
    title: str,
    color: str | None = None,
) -> ReminderList:
    """Create a new reminder list.

    Args:
        title: The name for the new list.
        color: Optional hex color code (e.g., "#FF5733"). If not provided,
               the system will assign a default color.

    Note:
        Colors may shift slightly (~30 units per RGB channel) due to
        iCloud color space conversion.
    """
    service = ReminderService.get_instance()
    return await run_serialized(service.create_list, title, color)


async def delete_reminder_list(name: str) -> ReminderList:
    """Delete the first list whose title contains ``name``.

    Warning: This will also delete all reminders in the list.

    Returns:
        The list that was deleted.

    Raises:
        NotFoundError: If no list title contains the name.
    """
    service = ReminderService.get_instance()
    return await run_serialized(service.delete_list, name)


__all__ = [
    "list_reminder_lists",
    "create_reminder_list",
    "delete_reminder_list",
]
