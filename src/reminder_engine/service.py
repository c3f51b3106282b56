"""Command service: every reminder command, built on the engine.

Each command fetches its full candidate set from the repository before
filtering, ranking or mutating anything, and writes at most one record at a
time.
"""

import logging
import threading
from collections.abc import Callable, Sequence

from pydantic import ValidationError

from . import mutations
from .clock import Clock, SystemClock
from .constants import REMINDERS_BACKEND
from .exceptions import NotFoundError, ParseError, StoreError
from .filters import ReminderFilter, apply_filters, is_overdue
from .lookup import find_list, find_reminder, matching_lists, resolve_target_list
from .models import (
    BatchResult,
    Frequency,
    ListSummary,
    LocationTrigger,
    OperationResult,
    OperationStatus,
    RecurrenceRule,
    Reminder,
    ReminderDetails,
    ReminderList,
    ReminderSection,
    ReminderStats,
    TagCount,
)
from .normalizers import parse_due_date
from .ranking import sort_reminders
from .repository import InMemoryRepository, Repository
from .stats import compute_stats, tag_frequency
from .subtasks import parse_subtasks
from .utils import paginate

logger = logging.getLogger(__name__)


def _build_repository(backend: str) -> Repository:
    if backend == "memory":
        return InMemoryRepository(
            lists=[ReminderList(id="reminders", title="Reminders", is_default=True)]
        )
    if backend == "eventkit":
        # Imported here so the engine works where PyObjC isn't installed
        from .store import ReminderStore

        return ReminderStore()
    raise ValueError(f"Unknown reminders backend: {backend}")


class ReminderService:
    """Reminder commands over a repository and a clock.

    Usage:
        service = ReminderService.get_instance()
        overdue = service.search(ReminderFilter(overdue=True))
    """

    _instance: "ReminderService | None" = None
    _lock = threading.Lock()

    def __init__(self, repository: Repository, clock: Clock | None = None) -> None:
        self.repository = repository
        self.clock = clock or SystemClock()

    @classmethod
    def get_instance(cls, backend: str | None = None) -> "ReminderService":
        """Get or create the process-wide service.

        The repository is chosen by ``backend`` or ``REMINDERS_BACKEND``.
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(_build_repository(backend or REMINDERS_BACKEND))
        return cls._instance

    @classmethod
    def set_instance(cls, service: "ReminderService | None") -> None:
        """Replace (or with None, reset) the process-wide service."""
        with cls._lock:
            cls._instance = service

    # Lists

    def list_lists(self) -> list[ListSummary]:
        summaries = []
        for reminder_list in sorted(self.repository.list_lists(), key=lambda l: l.title):
            reminders = self.repository.fetch_reminders([reminder_list])
            summaries.append(
                ListSummary(
                    reminder_list=reminder_list,
                    total=len(reminders),
                    completed=sum(1 for r in reminders if r.is_completed),
                )
            )
        return summaries

    def create_list(self, name: str, color: str | None = None) -> ReminderList:
        created = self.repository.create_list(name, color)
        logger.info(f"Created list {created.title} ({created.id})")
        return created

    def delete_list(self, name: str) -> ReminderList:
        """Delete the first list matching ``name``, with all its reminders."""
        reminder_list = find_list(self.repository.list_lists(), name)
        self.repository.remove_list(reminder_list)
        logger.info(f"Deleted list {reminder_list.title} ({reminder_list.id})")
        return reminder_list

    # Reads

    def _candidates(self, list_name: str | None) -> tuple[list[ReminderList], list[Reminder]]:
        lists = matching_lists(self.repository.list_lists(), list_name)
        return lists, self.repository.fetch_reminders(lists) if lists else []

    def list_reminders(
        self, list_name: str | None = None, filters: ReminderFilter | None = None
    ) -> list[ReminderSection]:
        """Filtered, ranked reminders grouped by list.

        With ``list_name`` only the first matching list is shown; otherwise
        every list, sorted by title.

        Raises:
            NotFoundError: If ``list_name`` matches no list.
        """
        all_lists = self.repository.list_lists()
        if list_name is not None:
            lists = [find_list(all_lists, list_name)]
        else:
            lists = sorted(all_lists, key=lambda l: l.title)

        reminders = self.repository.fetch_reminders(lists) if lists else []
        kept = apply_filters(reminders, filters or ReminderFilter(), self.clock)
        return [
            ReminderSection(
                reminder_list=reminder_list,
                reminders=sort_reminders(
                    r for r in kept if r.reminder_list.id == reminder_list.id
                ),
            )
            for reminder_list in lists
        ]

    def search(
        self,
        filters: ReminderFilter,
        list_name: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Reminder]:
        """Ranked reminders matching ``filters`` across every matching list."""
        _, reminders = self._candidates(list_name)
        ranked = sort_reminders(apply_filters(reminders, filters, self.clock))
        return paginate(ranked, offset, limit)

    def show(self, name: str, list_name: str | None = None) -> ReminderDetails:
        reminder = find_reminder(self.repository, name, list_name)
        band = reminder.priority_band
        return ReminderDetails(
            reminder=reminder,
            priority_band=band,
            priority_glyph=band.glyph,
            is_overdue=is_overdue(reminder, self.clock),
            tags=reminder.tags,
            subtasks=parse_subtasks(reminder.notes),
        )

    def stats(self, list_name: str | None = None) -> ReminderStats:
        lists, reminders = self._candidates(list_name)
        return compute_stats(reminders, self.clock, list_count=len(lists))

    def tags(self, list_name: str | None = None) -> list[TagCount]:
        _, reminders = self._candidates(list_name)
        return tag_frequency(reminders)

    # Writes

    def _persist(self, result: OperationResult) -> OperationResult:
        if result.changed and result.reminder is not None:
            result.reminder = self.repository.save(result.reminder)
            logger.info(result.message)
        else:
            logger.debug(result.message)
        return result

    def _modify(
        self,
        name: str,
        list_name: str | None,
        rule: Callable[[Reminder], OperationResult],
    ) -> OperationResult:
        reminder = find_reminder(self.repository, name, list_name)
        return self._persist(rule(reminder))

    def create(
        self,
        name: str,
        list_name: str | None = None,
        due_date: str | None = None,
        start_date: str | None = None,
        notes: str | None = None,
        priority: str | None = None,
        url: str | None = None,
        alarm_minutes_before: int | None = None,
    ) -> OperationResult:
        """Create and save a reminder.

        Raises:
            NotFoundError: If ``list_name`` matches no list.
            NoListAvailableError: If no list exists at all.
        """
        target = resolve_target_list(
            self.repository.list_lists(), self.repository.default_list(), list_name
        )
        reminder, ignored = mutations.create_reminder(
            name,
            target,
            self.clock,
            due_date=due_date,
            start_date=start_date,
            notes=notes,
            priority=priority,
            url=url,
            alarm_minutes_before=alarm_minutes_before,
        )
        saved = self.repository.save(reminder)
        message = f"Created reminder '{saved.title}' in list '{target.title}'"
        logger.info(message)
        return OperationResult(
            status=OperationStatus.CREATED,
            message=message,
            reminder=saved,
            ignored_fields=ignored,
        )

    def create_many(self, names: Sequence[str], list_name: str | None = None) -> BatchResult:
        """Create one title-only reminder per name in the same list."""
        return self._batch(names, list_name, lambda n, l: self.create(n, l))

    def update(
        self,
        name: str,
        list_name: str | None = None,
        title: str | None = None,
        priority: str | None = None,
        due_date: str | None = None,
        start_date: str | None = None,
        notes: str | None = None,
        url: str | None = None,
        move_to_list: str | None = None,
    ) -> OperationResult:
        """Update the supplied fields of the reminder matching ``name``.

        ``due_date``/``start_date`` of "remove" or "none" clear the date;
        ``url`` of "remove" clears the URL.
        """
        changes = {
            "title": title,
            "priority": priority,
            "due_date": due_date,
            "start_date": start_date,
            "notes": notes,
            "url": url,
            "move_to_list": move_to_list,
        }
        ctx = mutations.UpdateContext(self.clock, self.repository.list_lists())
        return self._modify(
            name, list_name, lambda r: mutations.update_reminder(r, changes, ctx)
        )

    def move(
        self, name: str, target_list: str, list_name: str | None = None
    ) -> OperationResult:
        """Move the reminder matching ``name`` to the first list matching ``target_list``."""
        target = find_list(self.repository.list_lists(), target_list)
        return self._modify(
            name, list_name, lambda r: mutations.move_reminder(r, target)
        )

    def _batch(
        self,
        names: Sequence[str],
        list_name: str | None,
        action: Callable[[str, str | None], OperationResult],
    ) -> BatchResult:
        """Run ``action`` for each name in order; a failure doesn't stop the rest."""
        batch = BatchResult(successes=0, failures=0)
        for name in names:
            try:
                result = action(name, list_name)
            except (NotFoundError, StoreError) as e:
                logger.warning(f"Failed on {name!r}: {e}")
                batch.failures += 1
                batch.failed_names.append(name)
                batch.errors.append(str(e))
                batch.results.append(
                    OperationResult(status=OperationStatus.FAILED, message=str(e))
                )
                continue
            batch.successes += 1
            batch.results.append(result)
        return batch

    def complete_one(self, name: str, list_name: str | None = None) -> OperationResult:
        return self._modify(
            name, list_name, lambda r: mutations.complete_reminder(r, self.clock)
        )

    def complete(self, names: Sequence[str], list_name: str | None = None) -> BatchResult:
        return self._batch(names, list_name, self.complete_one)

    def delete_one(self, name: str, list_name: str | None = None) -> OperationResult:
        reminder = find_reminder(self.repository, name, list_name)
        self.repository.remove(reminder)
        message = f"Deleted: {reminder.title} (from list {reminder.reminder_list.title})"
        logger.info(message)
        return OperationResult(
            status=OperationStatus.DELETED, message=message, reminder=reminder
        )

    def delete(self, names: Sequence[str], list_name: str | None = None) -> BatchResult:
        return self._batch(names, list_name, self.delete_one)

    def add_alarm(
        self,
        name: str,
        list_name: str | None = None,
        minutes_before: int | None = None,
        absolute_date: str | None = None,
    ) -> OperationResult:
        return self._modify(
            name,
            list_name,
            lambda r: mutations.add_alarm(r, minutes_before, absolute_date),
        )

    def remove_alarms(self, name: str, list_name: str | None = None) -> OperationResult:
        return self._modify(name, list_name, mutations.remove_alarms)

    def add_location(
        self, name: str, trigger: LocationTrigger, list_name: str | None = None
    ) -> OperationResult:
        return self._modify(
            name, list_name, lambda r: mutations.add_location_trigger(r, trigger)
        )

    def remove_location(self, name: str, list_name: str | None = None) -> OperationResult:
        return self._modify(name, list_name, mutations.remove_location_triggers)

    def add_recurrence(
        self,
        name: str,
        frequency: Frequency,
        interval: int = 1,
        end_date: str | None = None,
        occurrence_count: int | None = None,
        list_name: str | None = None,
    ) -> OperationResult:
        """Attach a recurrence rule; an unparseable end date leaves it unbounded.

        A rule that is still invalid, such as a zero interval or both an end
        date and a count, is reported as INVALID_INPUT and not saved.
        """
        ignored: list[str] = []
        end = None
        if end_date is not None:
            try:
                end = parse_due_date(end_date, self.clock)
            except ParseError as e:
                logger.info(f"Ignoring recurrence end date: {e}")
                ignored.append("end_date")
        reminder = find_reminder(self.repository, name, list_name)
        try:
            rule = RecurrenceRule(
                frequency=frequency,
                interval=interval,
                end_date=end,
                occurrence_count=occurrence_count,
            )
        except ValidationError as e:
            message = f"Invalid recurrence: {e.errors()[0]['msg']}"
            logger.info(message)
            return OperationResult(
                status=OperationStatus.INVALID_INPUT,
                message=message,
                reminder=reminder,
                ignored_fields=ignored,
            )
        result = self._persist(mutations.add_recurrence_rule(reminder, rule))
        result.ignored_fields.extend(ignored)
        return result

    def remove_recurrence(self, name: str, list_name: str | None = None) -> OperationResult:
        return self._modify(name, list_name, mutations.remove_recurrence_rules)

    def add_tag(self, name: str, tag: str, list_name: str | None = None) -> OperationResult:
        return self._modify(name, list_name, lambda r: mutations.add_tag(r, tag))

    def add_subtask(
        self, name: str, text: str, list_name: str | None = None
    ) -> OperationResult:
        return self._modify(name, list_name, lambda r: mutations.add_subtask(r, text))
