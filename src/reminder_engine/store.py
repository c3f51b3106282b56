"""EventKit-backed repository for macOS Reminders.

``ReminderStore`` implements the ``Repository`` protocol on top of
EKEventStore. Every public method runs inside an autorelease pool and
converts EventKit objects to engine models before returning, so callers
never hold ObjC proxies. Callers on an event loop should go through
``utils.run_serialized``.
"""

import logging
import threading
from collections.abc import Sequence
from typing import Any

import objc
from EventKit import (
    EKCalendar,
    EKEntityTypeReminder,
    EKEventStore,
    EKReminder,
    EKSourceTypeCalDAV,
    EKSourceTypeLocal,
)

from .constants import REQUEST_TIMEOUT
from .converters import (
    apply_model_to_ek_reminder,
    ek_calendar_to_list,
    ek_reminder_to_model,
    hex_to_cgcolor,
)
from .exceptions import (
    AccessDeniedError,
    NoListAvailableError,
    NotFoundError,
    PermissionTimeoutError,
    StoreError,
)
from .models import Reminder, ReminderList

logger = logging.getLogger(__name__)


class ReminderStore:
    """Repository over the native reminders database."""

    def __init__(self) -> None:
        """Initialize the store and request Reminders access.

        Raises:
            PermissionTimeoutError: If permission request times out
            AccessDeniedError: If user denies Reminders access
        """
        self._store: EKEventStore = EKEventStore.alloc().init()
        self._request_access_sync()

    def _request_access_sync(self) -> None:
        """Request Reminders access synchronously.

        Blocks until user responds to permission dialog or timeout.
        """
        event = threading.Event()
        result: dict[str, Any] = {"granted": False, "error": None}

        def handler(granted: bool, error: Any) -> None:
            result["granted"] = granted
            result["error"] = error
            event.set()

        self._store.requestFullAccessToRemindersWithCompletion_(handler)

        if not event.wait(timeout=REQUEST_TIMEOUT):
            raise PermissionTimeoutError(REQUEST_TIMEOUT)

        if result["error"]:
            raise AccessDeniedError(str(StoreError.from_nserror(result["error"])))

        if not result["granted"]:
            raise AccessDeniedError()

        logger.debug("Reminders access granted")

    # Lists (Calendars)

    def _default_calendar_id(self) -> str | None:
        default_cal = self._store.defaultCalendarForNewReminders()
        return default_cal.calendarIdentifier() if default_cal else None

    def list_lists(self) -> list[ReminderList]:
        with objc.autorelease_pool():
            default_id = self._default_calendar_id()
            return [
                ek_calendar_to_list(
                    cal, is_default=(cal.calendarIdentifier() == default_id)
                )
                for cal in self._store.calendarsForEntityType_(EKEntityTypeReminder)
            ]

    def default_list(self) -> ReminderList | None:
        with objc.autorelease_pool():
            default_cal = self._store.defaultCalendarForNewReminders()
            if not default_cal:
                return None
            return ek_calendar_to_list(default_cal, is_default=True)

    def create_list(self, title: str, color: str | None = None) -> ReminderList:
        """Create a new reminder list.

        Raises:
            NoListAvailableError: If no writable source is available
            StoreError: If save fails
        """
        with objc.autorelease_pool():
            source = self._get_writable_source()

            calendar = EKCalendar.calendarForEntityType_eventStore_(
                EKEntityTypeReminder, self._store
            )
            calendar.setTitle_(title)
            calendar.setSource_(source)

            if color:
                calendar.setCGColor_(hex_to_cgcolor(color))

            success, error = self._store.saveCalendar_commit_error_(calendar, True, None)
            if not success:
                raise StoreError.from_nserror(error)

            return ek_calendar_to_list(calendar, is_default=False)

    def remove_list(self, reminder_list: ReminderList) -> None:
        """Delete a reminder list and every reminder in it."""
        with objc.autorelease_pool():
            calendar = self._get_calendar(reminder_list.id)
            success, error = self._store.removeCalendar_commit_error_(calendar, True, None)
            if not success:
                raise StoreError.from_nserror(error)

    # Reminders

    def fetch_reminders(self, lists: Sequence[ReminderList]) -> list[Reminder]:
        """Fetch every reminder, completed or not, in ``lists``."""
        if not lists:
            return []

        with objc.autorelease_pool():
            by_id = {lst.id: lst for lst in lists}
            calendars = [self._get_calendar(list_id) for list_id in by_id]
            predicate = self._store.predicateForRemindersInCalendars_(calendars)

            event = threading.Event()
            reminder_list: list[Reminder] = []

            def handler(reminders: Any) -> None:
                if reminders:
                    # Convert to models INSIDE the callback thread
                    reminder_list.extend(
                        ek_reminder_to_model(r, by_id[r.calendar().calendarIdentifier()])
                        for r in reminders
                    )
                event.set()

            self._store.fetchRemindersMatchingPredicate_completion_(predicate, handler)

            if not event.wait(timeout=REQUEST_TIMEOUT):
                raise TimeoutError(f"Fetch reminders timed out after {REQUEST_TIMEOUT}s")

            return reminder_list

    def save(self, reminder: Reminder) -> Reminder:
        """Create or update a reminder.

        Raises:
            NotFoundError: If the reminder's id or list no longer exists
            StoreError: If save fails
        """
        with objc.autorelease_pool():
            if reminder.id is None:
                ek_reminder = EKReminder.reminderWithEventStore_(self._store)
            else:
                ek_reminder = self._get_reminder_by_id(reminder.id)

            calendar = self._get_calendar(reminder.reminder_list.id)
            apply_model_to_ek_reminder(reminder, ek_reminder, calendar)

            success, error = self._store.saveReminder_commit_error_(ek_reminder, True, None)
            if not success:
                raise StoreError.from_nserror(error)

            return ek_reminder_to_model(ek_reminder, reminder.reminder_list)

    def remove(self, reminder: Reminder) -> None:
        if reminder.id is None:
            raise NotFoundError("Reminder", reminder.title)

        with objc.autorelease_pool():
            ek_reminder = self._get_reminder_by_id(reminder.id)
            success, error = self._store.removeReminder_commit_error_(ek_reminder, True, None)
            if not success:
                raise StoreError.from_nserror(error)

    # Private Helpers

    def _get_calendar(self, list_id: str) -> Any:
        calendar = self._store.calendarWithIdentifier_(list_id)
        if not calendar:
            raise NotFoundError("List", list_id)
        return calendar

    def _get_reminder_by_id(self, reminder_id: str) -> EKReminder:
        """Get EKReminder by ID with fallback lookup.

        Raises:
            NotFoundError: If reminder doesn't exist
        """
        # Try local ID first (faster)
        reminder = self._store.calendarItemWithIdentifier_(reminder_id)
        if reminder and isinstance(reminder, EKReminder):
            return reminder

        # Fall back to external ID lookup
        for item in self._store.calendarItemsWithExternalIdentifier_(reminder_id) or []:
            if isinstance(item, EKReminder):
                return item

        raise NotFoundError("Reminder", reminder_id)

    def _get_writable_source(self) -> Any:
        """Get a writable source for creating new calendars.

        Priority: default calendar's source > iCloud/CalDAV > Local > any

        Raises:
            NoListAvailableError: If no writable source is available
        """
        default_cal = self._store.defaultCalendarForNewReminders()
        if default_cal and default_cal.allowsContentModifications():
            return default_cal.source()

        def writable(source: Any) -> bool:
            cals = source.calendarsForEntityType_(EKEntityTypeReminder)
            return bool(cals) and any(c.allowsContentModifications() for c in cals)

        sources = list(self._store.sources())
        for wanted in (EKSourceTypeCalDAV, EKSourceTypeLocal, None):
            for source in sources:
                if (wanted is None or source.sourceType() == wanted) and writable(source):
                    return source

        raise NoListAvailableError()
