"""FastMCP server exposing the reminder commands."""

import argparse
import logging
import signal
import sys
from typing import Any

from fastmcp import FastMCP

from .constants import LOG_LEVEL, REMINDERS_BACKEND
from .service import ReminderService
from .tools.attachments import (
    add_alarm,
    add_location_trigger,
    add_recurrence,
    add_subtask,
    add_tag,
    remove_alarms,
    remove_location_triggers,
    remove_recurrence,
)
from .tools.batch import add_reminders, complete_reminders, delete_reminders
from .tools.lists import create_reminder_list, delete_reminder_list, list_reminder_lists
from .tools.reminders import (
    create_reminder,
    get_reminders,
    move_reminder,
    show_reminder,
    update_reminder,
)
from .tools.search import list_tags, reminder_stats, search_reminders

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(
    name="reminder-engine",
    instructions="""
Manage reminders grouped into lists: create, update, complete, delete,
list, search, show and summarize them.

Reminders are addressed by name: the first reminder whose title contains
the name (case-insensitively) is used. Pass list_name to narrow the search.

## Available Tools

### List Management (3 tools)
| Tool | Purpose |
|------|---------|
| list_reminder_lists | All lists with completed/total counts |
| create_reminder_list | Create a new list with optional color |
| delete_reminder_list | Delete a list and its reminders |

### Reminders (5 tools)
| Tool | Purpose |
|------|---------|
| get_reminders | Reminders grouped by list, ranked |
| show_reminder | Full details of one reminder |
| create_reminder | Create with due/start date, notes, priority, url, alarm |
| update_reminder | Update any fields, clear due date or URL, move |
| move_reminder | Move reminder to a different list |

### Batch Operations (3 tools)
| Tool | Purpose |
|------|---------|
| complete_reminders | Complete several reminders by name |
| delete_reminders | Delete several reminders by name |
| add_reminders | Quick-add several reminders by title |

### Attachments (8 tools)
| Tool | Purpose |
|------|---------|
| add_alarm / remove_alarms | Time alarms |
| add_location_trigger / remove_location_triggers | Arrive/leave triggers |
| add_recurrence / remove_recurrence | Repeat schedules |
| add_tag | Append a #tag to the title |
| add_subtask | Add a checkbox line to the notes |

### Search (3 tools)
| Tool | Purpose |
|------|---------|
| search_reminders | Text, priority, tag, date and attribute filters |
| reminder_stats | Completion, priority and due-date statistics |
| list_tags | Tag usage counts |

## Dates
YYYY-MM-DD, MM/DD/YYYY, DD/MM/YYYY, "YYYY-MM-DD HH:MM", today, tomorrow,
yesterday, "in N days/weeks/months". Ambiguous dates such as 03/04/2025
are read month first (March 4th).
""",
)

# Register all MCP tools

# List management tools
mcp.tool(list_reminder_lists)
mcp.tool(create_reminder_list)
mcp.tool(delete_reminder_list)

# Reminder tools
mcp.tool(get_reminders)
mcp.tool(show_reminder)
mcp.tool(create_reminder)
mcp.tool(update_reminder)
mcp.tool(move_reminder)

# Batch tools
mcp.tool(complete_reminders)
mcp.tool(delete_reminders)
mcp.tool(add_reminders)

# Attachment tools
mcp.tool(add_alarm)
mcp.tool(remove_alarms)
mcp.tool(add_location_trigger)
mcp.tool(remove_location_triggers)
mcp.tool(add_recurrence)
mcp.tool(remove_recurrence)
mcp.tool(add_tag)
mcp.tool(add_subtask)

# Search tools
mcp.tool(search_reminders)
mcp.tool(reminder_stats)
mcp.tool(list_tags)


# Signal handling for graceful shutdown
def signal_handler(signum: int, frame: Any) -> None:
    """Handle shutdown signals."""
    logger.info(f"Received signal {signum}, shutting down...")
    sys.exit(0)


def main() -> None:
    parser = argparse.ArgumentParser(description="An MCP server for reminders")
    parser.add_argument(
        "--backend",
        choices=["eventkit", "memory"],
        default=REMINDERS_BACKEND,
        help="Reminder store to use (default: %(default)s)",
    )
    args = parser.parse_args()

    # Build the service now so the permission dialog appears at startup
    # rather than on the first tool call
    try:
        logger.info(f"Opening {args.backend} reminder store...")
        ReminderService.get_instance(args.backend)
        logger.info("Reminder store ready")
    except Exception as e:
        logger.error(f"Failed to open reminder store: {e}")
        logger.error(
            "Please grant Reminders access in System Settings > "
            "Privacy & Security > Reminders"
        )
        sys.exit(1)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    mcp.run()


if __name__ == "__main__":
    main()
