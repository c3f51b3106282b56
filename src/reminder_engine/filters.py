"""Predicate pipeline shared by every read command.

Raw filter options are turned into an ordered list of independent boolean
predicates over ``Reminder`` and AND-combined.
"""

import logging
from collections.abc import Callable, Iterable

from pydantic import BaseModel, Field

from .clock import Clock
from .exceptions import ParseError
from .models import Reminder
from .normalizers import canonical_tag, parse_date, parse_priority

logger = logging.getLogger(__name__)

Predicate = Callable[[Reminder], bool]


class ReminderFilter(BaseModel):
    """Raw filter options as supplied by the user.

    Date and priority values are unparsed strings; a value that fails to
    parse drops its filter instead of failing the command.
    """

    uncompleted_only: bool = Field(default=False, description="Only open reminders")
    completed_only: bool = Field(default=False, description="Only completed reminders")
    has_url: bool = Field(default=False, description="Only reminders with a URL")
    has_notes: bool = Field(default=False, description="Only reminders with notes")
    has_alarms: bool = Field(default=False, description="Only reminders with alarms")
    priority: str | None = Field(
        default=None, description="high/medium/low/none or 0-9"
    )
    overdue: bool = Field(default=False, description="Only open reminders past due")
    due_before: str | None = Field(default=None, description="Due strictly before")
    due_after: str | None = Field(default=None, description="Due strictly after")
    tag: str | None = Field(default=None, description="Tag, with or without '#'")
    query: str | None = Field(
        default=None, description="Case-insensitive text searched in title and notes"
    )


def is_overdue(reminder: Reminder, clock: Clock) -> bool:
    """Open, has a due date, and that date is in the past."""
    return (
        not reminder.is_completed
        and reminder.due_date is not None
        and reminder.due_date < clock.now()
    )


def matches_query(reminder: Reminder, query: str) -> bool:
    needle = query.lower()
    return needle in reminder.title.lower() or needle in (reminder.notes or "").lower()


def has_tag(reminder: Reminder, tag: str) -> bool:
    token = canonical_tag(tag)
    return token in reminder.title or token in (reminder.notes or "")


def _due_before(threshold):
    return lambda r: r.due_date is not None and r.due_date < threshold


def _due_after(threshold):
    return lambda r: r.due_date is not None and r.due_date > threshold


def build_predicates(options: ReminderFilter, clock: Clock) -> list[Predicate]:
    """Build predicates in a fixed declaration order.

    Completion flags are plain predicates too, so asking for both completed
    and uncompleted reminders matches nothing.
    """
    predicates: list[Predicate] = []

    if options.query:
        query = options.query
        predicates.append(lambda r: matches_query(r, query))

    if options.priority is not None:
        try:
            priority = parse_priority(options.priority)
        except ParseError as e:
            logger.info(f"Ignoring priority filter: {e}")
        else:
            predicates.append(lambda r: r.priority == priority)

    if options.has_url:
        predicates.append(lambda r: r.has_url)
    if options.has_notes:
        predicates.append(lambda r: r.has_notes)
    if options.has_alarms:
        predicates.append(lambda r: r.has_alarms)

    if options.completed_only:
        predicates.append(lambda r: r.is_completed)
    if options.uncompleted_only:
        predicates.append(lambda r: not r.is_completed)

    if options.overdue:
        predicates.append(lambda r: is_overdue(r, clock))

    for value, make in (
        (options.due_before, _due_before),
        (options.due_after, _due_after),
    ):
        if value is None:
            continue
        try:
            threshold = parse_date(value, clock)
        except ParseError as e:
            logger.info(f"Ignoring due date filter: {e}")
            continue
        predicates.append(make(threshold))

    if options.tag:
        tag = options.tag
        if len(canonical_tag(tag)) <= 1:
            logger.info(f"Ignoring tag filter: {tag!r} is not a tag")
        else:
            predicates.append(lambda r: has_tag(r, tag))

    return predicates


def combine(predicates: Iterable[Predicate]) -> Predicate:
    """AND-combine predicates; an empty pipeline accepts everything."""
    predicates = list(predicates)
    return lambda r: all(p(r) for p in predicates)


def apply_filters(
    reminders: Iterable[Reminder], options: ReminderFilter, clock: Clock
) -> list[Reminder]:
    """Keep the reminders matching every supplied filter."""
    keep = combine(build_predicates(options, clock))
    return [r for r in reminders if keep(r)]
