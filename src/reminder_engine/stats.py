"""Statistics and tag frequency over a set of reminders."""

from collections import Counter
from collections.abc import Sequence
from datetime import timedelta

from .clock import Clock, start_of_day
from .filters import is_overdue
from .models import PriorityBand, Reminder, ReminderStats, TagCount
from .normalizers import extract_tags


def compute_stats(
    reminders: Sequence[Reminder], clock: Clock, list_count: int = 0
) -> ReminderStats:
    """Counts, completion rate, priority bands and upcoming due dates.

    Priority bands and due-date buckets only count open reminders. Buckets
    are measured from the start of the current local day.
    """
    total = len(reminders)
    completed = sum(1 for r in reminders if r.is_completed)
    open_reminders = [r for r in reminders if not r.is_completed]

    bands = Counter(r.priority_band for r in open_reminders)

    today = start_of_day(clock.now())
    tomorrow = today + timedelta(days=1)
    day_after = today + timedelta(days=2)
    next_week = today + timedelta(days=7)
    due_dates = [r.due_date for r in open_reminders if r.due_date is not None]

    return ReminderStats(
        list_count=list_count,
        total=total,
        completed=completed,
        incomplete=total - completed,
        completion_percentage=(completed / total * 100) if total else 0.0,
        overdue=sum(1 for r in reminders if is_overdue(r, clock)),
        high_priority=bands[PriorityBand.HIGH],
        medium_priority=bands[PriorityBand.MEDIUM],
        low_priority=bands[PriorityBand.LOW],
        with_url=sum(1 for r in reminders if r.has_url),
        with_notes=sum(1 for r in reminders if r.has_notes),
        with_alarms=sum(1 for r in reminders if r.has_alarms),
        due_today=sum(1 for d in due_dates if today <= d < tomorrow),
        due_tomorrow=sum(1 for d in due_dates if tomorrow <= d < day_after),
        due_this_week=sum(1 for d in due_dates if today <= d < next_week),
    )


def tag_frequency(reminders: Sequence[Reminder]) -> list[TagCount]:
    """How many reminders carry each tag, most frequent first.

    Tags come from the title and, for older reminders, the notes; each
    reminder counts once per distinct tag. Ties are ordered by tag name.
    """
    counts: Counter[str] = Counter()
    for reminder in reminders:
        tags = set(extract_tags(reminder.title)[1])
        tags.update(extract_tags(reminder.notes)[1])
        counts.update(tags)
    return [
        TagCount(tag=tag, count=count)
        for tag, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]
