"""Mutation rules behind every write command.

Each rule works on a copy of the reminder and returns an ``OperationResult``
describing the outcome; persisting the result is the caller's job. A rule
never fails because an optional input did not parse: the field is skipped
and named in ``ignored_fields``.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, NamedTuple

from .clock import Clock
from .constants import ALARM_DATE_FORMAT
from .exceptions import NotFoundError, ParseError
from .lookup import find_list
from .models import (
    Alarm,
    AlarmKind,
    LocationTrigger,
    OperationResult,
    OperationStatus,
    RecurrenceRule,
    Reminder,
    ReminderList,
)
from .normalizers import (
    canonical_tag,
    canonical_title,
    parse_due_date,
    parse_priority,
    parse_url,
)
from .subtasks import append_subtask

logger = logging.getLogger(__name__)

CLEAR_DATE_WORDS = frozenset({"remove", "none"})
CLEAR_URL_WORDS = frozenset({"remove"})


def create_reminder(
    name: str,
    target_list: ReminderList,
    clock: Clock,
    due_date: str | None = None,
    start_date: str | None = None,
    notes: str | None = None,
    priority: str | None = None,
    url: str | None = None,
    alarm_minutes_before: int | None = None,
) -> tuple[Reminder, list[str]]:
    """Build a new, unsaved reminder.

    Tags in ``name`` are moved to the end of the title in ``#tag`` form.
    Optional values that fail to parse are left unset. An alarm offset is
    dropped when no due date resolved, since it has nothing to count from.

    Returns:
        Tuple of (reminder, names of ignored fields).
    """
    if not name.strip():
        raise ValueError("Reminder name cannot be empty")

    ignored: list[str] = []
    fields: dict[str, Any] = {}

    for field, raw in (("due_date", due_date), ("start_date", start_date)):
        if raw is None:
            continue
        try:
            fields[field] = parse_due_date(raw, clock)
        except ParseError as e:
            logger.info(f"Ignoring {field}: {e}")
            ignored.append(field)

    if priority is not None:
        try:
            fields["priority"] = parse_priority(priority)
        except ParseError as e:
            logger.info(f"Ignoring priority: {e}")
            ignored.append("priority")

    if url is not None:
        try:
            fields["url"] = parse_url(url)
        except ParseError as e:
            logger.info(f"Ignoring url: {e}")
            ignored.append("url")

    if notes is not None:
        fields["notes"] = notes

    if alarm_minutes_before is not None:
        if alarm_minutes_before < 0:
            logger.info(f"Dropping alarm request: negative offset {alarm_minutes_before}")
            ignored.append("alarm_minutes_before")
        elif "due_date" in fields:
            fields["alarms"] = [Alarm.relative(alarm_minutes_before)]
        else:
            logger.info("Dropping alarm request: reminder has no due date")
            ignored.append("alarm_minutes_before")

    reminder = Reminder(
        title=canonical_title(name),
        reminder_list=target_list,
        **fields,
    )
    return reminder, ignored


# Field-level updates

class UpdateContext(NamedTuple):
    clock: Clock
    lists: Sequence[ReminderList]


class UpdateDirective(NamedTuple):
    """A parsed value bound for one model attribute."""

    option: str
    attribute: str
    value: Any


def _parse_title(raw: str, ctx: UpdateContext) -> str:
    if not raw.strip():
        raise ParseError("title", raw)
    return raw


def _parse_text(raw: str, ctx: UpdateContext) -> str:
    return raw


def _parse_priority(raw: str, ctx: UpdateContext) -> int:
    return parse_priority(raw)


def _parse_date_or_clear(raw: str, ctx: UpdateContext) -> datetime | None:
    if raw.strip().lower() in CLEAR_DATE_WORDS:
        return None
    return parse_due_date(raw, ctx.clock)


def _parse_url_or_clear(raw: str, ctx: UpdateContext) -> str | None:
    if raw.strip().lower() in CLEAR_URL_WORDS:
        return None
    return parse_url(raw)


def _parse_list(raw: str, ctx: UpdateContext) -> ReminderList:
    try:
        return find_list(ctx.lists, raw)
    except NotFoundError as e:
        raise ParseError("list", raw) from e


# option name -> (Reminder attribute, parser); order is application order
UPDATE_FIELDS: dict[str, tuple[str, Callable[[str, UpdateContext], Any]]] = {
    "title": ("title", _parse_title),
    "priority": ("priority", _parse_priority),
    "due_date": ("due_date", _parse_date_or_clear),
    "start_date": ("start_date", _parse_date_or_clear),
    "notes": ("notes", _parse_text),
    "url": ("url", _parse_url_or_clear),
    "move_to_list": ("reminder_list", _parse_list),
}


def plan_update(
    changes: dict[str, str | None], ctx: UpdateContext
) -> tuple[list[UpdateDirective], list[str]]:
    """Parse the supplied options into directives.

    Options set to None were not supplied. Unknown option names raise
    ``KeyError``.

    Returns:
        Tuple of (directives, names of supplied options that did not parse).
    """
    unknown = set(changes) - set(UPDATE_FIELDS)
    if unknown:
        raise KeyError(f"Unknown update fields: {sorted(unknown)}")

    directives: list[UpdateDirective] = []
    ignored: list[str] = []
    for option, (attribute, parser) in UPDATE_FIELDS.items():
        raw = changes.get(option)
        if raw is None:
            continue
        try:
            directives.append(UpdateDirective(option, attribute, parser(raw, ctx)))
        except ParseError as e:
            logger.info(f"Ignoring {option}: {e}")
            ignored.append(option)
    return directives, ignored


def apply_update(reminder: Reminder, directives: Sequence[UpdateDirective]) -> Reminder:
    return reminder.model_copy(
        deep=True, update={d.attribute: d.value for d in directives}
    )


def update_reminder(
    reminder: Reminder, changes: dict[str, str | None], ctx: UpdateContext
) -> OperationResult:
    """Apply each supplied field independently.

    Reports NO_CHANGES when nothing was supplied and UNCHANGED when every
    supplied value failed to parse; only UPDATED results need saving.
    """
    if all(value is None for value in changes.values()):
        return OperationResult(
            status=OperationStatus.NO_CHANGES,
            message="No changes specified.",
            reminder=reminder,
        )

    directives, ignored = plan_update(changes, ctx)
    if not directives:
        return OperationResult(
            status=OperationStatus.UNCHANGED,
            message=f"No valid changes for: {reminder.title}",
            reminder=reminder,
            ignored_fields=ignored,
        )

    updated = apply_update(reminder, directives)
    return OperationResult(
        status=OperationStatus.UPDATED,
        message=f"Updated reminder: {updated.title}",
        reminder=updated,
        count=len(directives),
        ignored_fields=ignored,
    )


def move_reminder(reminder: Reminder, target_list: ReminderList) -> OperationResult:
    """Reassign the owning list; the record itself is never duplicated."""
    if reminder.reminder_list.id == target_list.id:
        return OperationResult(
            status=OperationStatus.UNCHANGED,
            message=f"Reminder already in list {target_list.title}: {reminder.title}",
            reminder=reminder,
        )
    moved = reminder.model_copy(deep=True, update={"reminder_list": target_list})
    return OperationResult(
        status=OperationStatus.UPDATED,
        message=f"Moved {moved.title} to list {target_list.title}",
        reminder=moved,
    )


def complete_reminder(reminder: Reminder, clock: Clock) -> OperationResult:
    if reminder.is_completed:
        return OperationResult(
            status=OperationStatus.ALREADY_COMPLETED,
            message=f"Reminder already completed: {reminder.title}",
            reminder=reminder,
        )
    done = reminder.model_copy(
        deep=True, update={"is_completed": True, "completion_date": clock.now()}
    )
    return OperationResult(
        status=OperationStatus.COMPLETED,
        message=f"Completed: {done.title} (in list {done.reminder_list.title})",
        reminder=done,
    )


# Tags and subtasks

def add_tag(reminder: Reminder, tag: str) -> OperationResult:
    token = canonical_tag(tag)
    if len(token) <= 1 or any(c.isspace() for c in token):
        return OperationResult(
            status=OperationStatus.INVALID_INPUT,
            message=f"Invalid tag: {tag!r}",
            reminder=reminder,
        )
    if token in reminder.title:
        return OperationResult(
            status=OperationStatus.ALREADY_EXISTS,
            message=f"Tag {token} already exists on: {reminder.title}",
            reminder=reminder,
        )
    tagged = reminder.model_copy(
        deep=True, update={"title": f"{reminder.title} {token}"}
    )
    return OperationResult(
        status=OperationStatus.UPDATED,
        message=f"Added tag {token} to: {tagged.title}",
        reminder=tagged,
        count=1,
    )


def add_subtask(reminder: Reminder, text: str) -> OperationResult:
    if not text.strip():
        return OperationResult(
            status=OperationStatus.INVALID_INPUT,
            message="Subtask text cannot be empty",
            reminder=reminder,
        )
    updated = reminder.model_copy(
        deep=True, update={"notes": append_subtask(reminder.notes, text)}
    )
    return OperationResult(
        status=OperationStatus.UPDATED,
        message=f"Added subtask to: {updated.title}",
        reminder=updated,
        count=1,
    )


# Alarms, location triggers and recurrence

def _with_alarm(reminder: Reminder, alarm: Alarm, message: str) -> OperationResult:
    updated = reminder.model_copy(deep=True, update={"alarms": [*reminder.alarms, alarm]})
    return OperationResult(
        status=OperationStatus.UPDATED, message=message, reminder=updated, count=1
    )


def add_alarm(
    reminder: Reminder,
    minutes_before: int | None = None,
    absolute_date: str | None = None,
) -> OperationResult:
    """Add a relative alarm or one at ``YYYY-MM-DD HH:MM``.

    A relative alarm needs a due date to count back from.
    """
    if minutes_before is not None:
        if minutes_before < 0:
            return OperationResult(
                status=OperationStatus.INVALID_INPUT,
                message="Alarm minutes before due date cannot be negative.",
                reminder=reminder,
                ignored_fields=["minutes_before"],
            )
        if reminder.due_date is None:
            return OperationResult(
                status=OperationStatus.INVALID_INPUT,
                message="Reminder must have a due date to use relative alarms.",
                reminder=reminder,
            )
        return _with_alarm(
            reminder,
            Alarm.relative(minutes_before),
            f"Added alarm to: {reminder.title}",
        )

    if absolute_date is not None:
        try:
            when = datetime.strptime(absolute_date.strip(), ALARM_DATE_FORMAT)
        except ValueError:
            return OperationResult(
                status=OperationStatus.INVALID_INPUT,
                message="Invalid date format. Use YYYY-MM-DD HH:MM",
                reminder=reminder,
                ignored_fields=["absolute_date"],
            )
        return _with_alarm(reminder, Alarm.absolute(when), f"Added alarm to: {reminder.title}")

    return OperationResult(
        status=OperationStatus.INVALID_INPUT,
        message="Must specify either minutes_before or absolute_date",
        reminder=reminder,
    )


def remove_alarms(reminder: Reminder, kind: AlarmKind | None = None) -> OperationResult:
    """Remove every alarm, or every alarm of ``kind``, and report how many."""
    kept = [a for a in reminder.alarms if kind is not None and a.kind != kind]
    removed = len(reminder.alarms) - len(kept)
    label = "alarms" if kind is None else f"{kind.value} alarms"
    if removed == 0:
        return OperationResult(
            status=OperationStatus.NOTHING_TO_REMOVE,
            message=f"Reminder has no {label}: {reminder.title}",
            reminder=reminder,
        )
    updated = reminder.model_copy(deep=True, update={"alarms": kept})
    return OperationResult(
        status=OperationStatus.UPDATED,
        message=f"Removed {removed} {label} from: {reminder.title}",
        reminder=updated,
        count=removed,
    )


def add_location_trigger(reminder: Reminder, trigger: LocationTrigger) -> OperationResult:
    return _with_alarm(
        reminder,
        Alarm.at_location(trigger),
        f"Added location trigger {trigger.title!r} to: {reminder.title}",
    )


def remove_location_triggers(reminder: Reminder) -> OperationResult:
    return remove_alarms(reminder, AlarmKind.LOCATION)


def add_recurrence_rule(reminder: Reminder, rule: RecurrenceRule) -> OperationResult:
    updated = reminder.model_copy(
        deep=True, update={"recurrence_rules": [*reminder.recurrence_rules, rule]}
    )
    return OperationResult(
        status=OperationStatus.UPDATED,
        message=f"Added {rule.frequency.value} recurrence to: {reminder.title}",
        reminder=updated,
        count=1,
    )


def remove_recurrence_rules(reminder: Reminder) -> OperationResult:
    removed = len(reminder.recurrence_rules)
    if removed == 0:
        return OperationResult(
            status=OperationStatus.NOTHING_TO_REMOVE,
            message=f"Reminder has no recurrence rules: {reminder.title}",
            reminder=reminder,
        )
    updated = reminder.model_copy(deep=True, update={"recurrence_rules": []})
    return OperationResult(
        status=OperationStatus.UPDATED,
        message=f"Removed {removed} recurrence rule(s) from: {reminder.title}",
        reminder=updated,
        count=removed,
    )
