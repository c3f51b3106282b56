"""Repository contract for the reminder store, plus an in-memory adapter.

The engine only talks to the store through ``Repository``. The EventKit
adapter lives in ``store.py``; ``InMemoryRepository`` backs tests and the
``memory`` backend.
"""

import logging
import uuid
from collections.abc import Sequence
from typing import Protocol

from .clock import Clock, SystemClock
from .exceptions import NotFoundError, StoreError
from .models import Reminder, ReminderList

logger = logging.getLogger(__name__)


class Repository(Protocol):
    """Operations the engine needs from a reminder store."""

    def list_lists(self) -> list[ReminderList]:
        """All lists, in the store's enumeration order."""
        ...

    def default_list(self) -> ReminderList | None:
        """The list new reminders go to when none is named."""
        ...

    def fetch_reminders(self, lists: Sequence[ReminderList]) -> list[Reminder]:
        """Every reminder in ``lists``, completed or not.

        Raises:
            AccessDeniedError: If the store refuses access.
        """
        ...

    def save(self, reminder: Reminder) -> Reminder:
        """Insert or update ``reminder`` and return the stored copy.

        Raises:
            StoreError: If the store rejects the write.
        """
        ...

    def remove(self, reminder: Reminder) -> None:
        ...

    def create_list(self, title: str, color: str | None = None) -> ReminderList:
        ...

    def remove_list(self, reminder_list: ReminderList) -> None:
        ...


class InMemoryRepository:
    """Dict-backed repository; ids are uuid4 hex strings."""

    def __init__(
        self,
        lists: Sequence[ReminderList] = (),
        reminders: Sequence[Reminder] = (),
        clock: Clock | None = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._lists: dict[str, ReminderList] = {lst.id: lst for lst in lists}
        self._reminders: dict[str, Reminder] = {}
        for reminder in reminders:
            self.save(reminder)

    def list_lists(self) -> list[ReminderList]:
        return list(self._lists.values())

    def default_list(self) -> ReminderList | None:
        for reminder_list in self._lists.values():
            if reminder_list.is_default:
                return reminder_list
        return None

    def fetch_reminders(self, lists: Sequence[ReminderList]) -> list[Reminder]:
        wanted = {lst.id for lst in lists}
        return [
            r.model_copy(deep=True)
            for r in self._reminders.values()
            if r.reminder_list.id in wanted
        ]

    def save(self, reminder: Reminder) -> Reminder:
        if reminder.reminder_list.id not in self._lists:
            raise StoreError(
                f"Failed to save reminder: list {reminder.reminder_list.title!r} does not exist"
            )
        now = self._clock.now()
        stored = reminder.model_copy(deep=True)
        if stored.id is None:
            stored.id = uuid.uuid4().hex
        if stored.creation_date is None:
            stored.creation_date = now
        stored.last_modified_date = now
        self._reminders[stored.id] = stored
        logger.debug(f"Saved reminder {stored.id}: {stored.title}")
        return stored.model_copy(deep=True)

    def remove(self, reminder: Reminder) -> None:
        if reminder.id is None or reminder.id not in self._reminders:
            raise NotFoundError("Reminder", reminder.id or reminder.title)
        del self._reminders[reminder.id]

    def create_list(self, title: str, color: str | None = None) -> ReminderList:
        reminder_list = ReminderList(
            id=uuid.uuid4().hex, title=title, color=color, source="Local"
        )
        self._lists[reminder_list.id] = reminder_list
        return reminder_list

    def remove_list(self, reminder_list: ReminderList) -> None:
        if reminder_list.id not in self._lists:
            raise NotFoundError("List", reminder_list.id)
        del self._lists[reminder_list.id]
        self._reminders = {
            rid: r
            for rid, r in self._reminders.items()
            if r.reminder_list.id != reminder_list.id
        }
