"""MCP tools for reminders."""

from .attachments import (
    add_alarm,
    add_location_trigger,
    add_recurrence,
    add_subtask,
    add_tag,
    remove_alarms,
    remove_location_triggers,
    remove_recurrence,
)
from .batch import add_reminders, complete_reminders, delete_reminders
from .lists import create_reminder_list, delete_reminder_list, list_reminder_lists
from .reminders import (
    create_reminder,
    get_reminders,
    move_reminder,
    show_reminder,
    update_reminder,
)
from .search import list_tags, reminder_stats, search_reminders

__all__ = [
    # List management
    "list_reminder_lists",
    "create_reminder_list",
    "delete_reminder_list",
    # Reminder CRUD
    "get_reminders",
    "show_reminder",
    "create_reminder",
    "update_reminder",
    "move_reminder",
    # Batch operations
    "complete_reminders",
    "delete_reminders",
    "add_reminders",
    # Attachments
    "add_alarm",
    "remove_alarms",
    "add_location_trigger",
    "remove_location_triggers",
    "add_recurrence",
    "remove_recurrence",
    "add_tag",
    "add_subtask",
    # Search and summaries
    "search_reminders",
    "reminder_stats",
    "list_tags",
]
