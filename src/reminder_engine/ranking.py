"""Ordering used for every list and search result.

Keys, in priority order:

1. incomplete before completed
2. priority rank, most urgent first with "none" last
3. reminders with a due date first, earlier dates first
4. title, case-insensitively

The record id breaks any remaining tie so the order is total.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from .models import Reminder

NO_PRIORITY_RANK = 10


def priority_rank(priority: int) -> int:
    """Sort rank for a priority: 1-9 as is, 0 ("none") after 9."""
    return priority if priority != 0 else NO_PRIORITY_RANK


def sort_key(reminder: Reminder) -> tuple[Any, ...]:
    due = reminder.due_date
    return (
        reminder.is_completed,
        priority_rank(reminder.priority),
        due is None,
        due or datetime.min,
        reminder.title.casefold(),
        reminder.title,
        reminder.id or "",
    )


def compare(a: Reminder, b: Reminder) -> int:
    """Three-way comparison: negative if ``a`` sorts first."""
    key_a, key_b = sort_key(a), sort_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_reminders(reminders: Iterable[Reminder]) -> list[Reminder]:
    return sorted(reminders, key=sort_key)
