"""Name-based lookup of lists and reminders."""

import logging
from collections.abc import Sequence

from .exceptions import NoListAvailableError, NotFoundError
from .models import Reminder, ReminderList
from .normalizers import extract_tags
from .repository import Repository

logger = logging.getLogger(__name__)


def matching_lists(lists: Sequence[ReminderList], name: str | None) -> list[ReminderList]:
    """Lists whose title contains ``name`` case-insensitively; all lists if no name."""
    if name is None:
        return list(lists)
    needle = name.lower()
    return [lst for lst in lists if needle in lst.title.lower()]


def find_list(lists: Sequence[ReminderList], name: str) -> ReminderList:
    """First list whose title contains ``name``, in enumeration order.

    Raises:
        NotFoundError: If no list matches.
    """
    found = matching_lists(lists, name)
    if not found:
        raise NotFoundError("List", name)
    return found[0]


def resolve_target_list(
    lists: Sequence[ReminderList],
    default: ReminderList | None,
    name: str | None = None,
) -> ReminderList:
    """Pick the list a new reminder goes to.

    An explicit name must match; otherwise the store's default list is used,
    then the first enumerated list.

    Raises:
        NotFoundError: If ``name`` matches no list.
        NoListAvailableError: If there are no lists at all.
    """
    if name is not None:
        return find_list(lists, name)
    if default is not None:
        return default
    if lists:
        return lists[0]
    raise NoListAvailableError()


def title_matches(reminder: Reminder, name: str) -> bool:
    """Whether ``name`` identifies ``reminder``.

    Plain containment first, then the same check with tags stripped from
    both sides so "Buy milk #shopping" still finds "Buy #shopping milk".
    """
    needle = name.lower()
    if needle in reminder.title.lower():
        return True
    clean_needle = extract_tags(name)[0].lower()
    return bool(clean_needle) and clean_needle in reminder.clean_title.lower()


def find_reminder(
    repository: Repository, name: str, list_name: str | None = None
) -> Reminder:
    """First reminder matching ``name``, searching lists in enumeration order.

    Lists are fetched one at a time and the search stops at the first hit.

    Raises:
        NotFoundError: If no reminder matches.
    """
    for reminder_list in matching_lists(repository.list_lists(), list_name):
        for reminder in repository.fetch_reminders([reminder_list]):
            if title_matches(reminder, name):
                logger.debug(f"Matched {name!r} to reminder {reminder.id}")
                return reminder
    raise NotFoundError("Reminder", name)
