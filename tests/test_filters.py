"""Tests for the predicate pipeline."""

import itertools
from datetime import datetime

import pytest

from reminder_engine.filters import (
    ReminderFilter,
    apply_filters,
    build_predicates,
    combine,
    is_overdue,
)
from reminder_engine.models import Alarm


@pytest.fixture
def records(make_reminder):
    return [
        make_reminder("Overdue task", due_date=datetime(2025, 1, 14), priority=1),
        make_reminder("Done overdue", due_date=datetime(2025, 1, 14), is_completed=True),
        make_reminder("Future #work item", due_date=datetime(2025, 2, 1), priority=5,
                      url="https://example.com"),
        make_reminder("No date", notes="remember the #work thing",
                      alarms=[Alarm.relative(5)]),
        make_reminder("Empty notes", notes=""),
    ]


def titles(reminders):
    return sorted(r.title for r in reminders)


class TestOverdue:
    def test_yesterday_open_is_overdue(self, make_reminder, clock):
        reminder = make_reminder(due_date=datetime(2025, 1, 14))
        assert is_overdue(reminder, clock)

    def test_completed_is_not_overdue(self, make_reminder, clock):
        reminder = make_reminder(due_date=datetime(2025, 1, 14), is_completed=True)
        assert not is_overdue(reminder, clock)

    def test_without_due_date_is_not_overdue(self, make_reminder, clock):
        assert not is_overdue(make_reminder(), clock)

    def test_due_later_today_is_not_overdue(self, make_reminder, clock):
        assert not is_overdue(make_reminder(due_date=datetime(2025, 1, 15, 18, 0)), clock)


class TestFilters:
    def test_no_filters_keeps_everything(self, records, clock):
        assert len(apply_filters(records, ReminderFilter(), clock)) == len(records)

    def test_completion_filters(self, records, clock):
        done = apply_filters(records, ReminderFilter(completed_only=True), clock)
        open_ = apply_filters(records, ReminderFilter(uncompleted_only=True), clock)
        assert titles(done) == ["Done overdue"]
        assert len(open_) == 4

    def test_both_completion_filters_match_nothing(self, records, clock):
        options = ReminderFilter(completed_only=True, uncompleted_only=True)
        assert apply_filters(records, options, clock) == []

    def test_attribute_presence(self, records, clock):
        assert titles(apply_filters(records, ReminderFilter(has_url=True), clock)) == [
            "Future #work item"
        ]
        assert titles(apply_filters(records, ReminderFilter(has_notes=True), clock)) == [
            "No date"
        ]
        assert titles(apply_filters(records, ReminderFilter(has_alarms=True), clock)) == [
            "No date"
        ]

    def test_priority(self, records, clock):
        result = apply_filters(records, ReminderFilter(priority="high"), clock)
        assert titles(result) == ["Overdue task"]

    def test_unparseable_priority_is_ignored(self, records, clock):
        result = apply_filters(records, ReminderFilter(priority="urgent"), clock)
        assert len(result) == len(records)

    def test_overdue(self, records, clock):
        result = apply_filters(records, ReminderFilter(overdue=True), clock)
        assert titles(result) == ["Overdue task"]

    def test_due_before_and_after_skip_undated(self, records, clock):
        before = apply_filters(records, ReminderFilter(due_before="2025-01-20"), clock)
        after = apply_filters(records, ReminderFilter(due_after="today"), clock)
        assert titles(before) == ["Done overdue", "Overdue task"]
        assert titles(after) == ["Future #work item"]

    def test_due_bounds_are_strict(self, records, clock):
        result = apply_filters(records, ReminderFilter(due_before="2025-01-14"), clock)
        assert result == []

    def test_unparseable_due_filter_is_ignored(self, records, clock):
        result = apply_filters(records, ReminderFilter(due_before="whenever"), clock)
        assert len(result) == len(records)

    @pytest.mark.parametrize("tag", ["work", "#work"])
    def test_tag_in_title_or_notes(self, records, clock, tag):
        result = apply_filters(records, ReminderFilter(tag=tag), clock)
        assert titles(result) == ["Future #work item", "No date"]

    @pytest.mark.parametrize("tag", ["#", " # "])
    def test_bare_hash_tag_is_ignored(self, records, clock, tag):
        result = apply_filters(records, ReminderFilter(tag=tag), clock)
        assert len(result) == len(records)

    def test_query_is_case_insensitive_over_title_and_notes(self, records, clock):
        result = apply_filters(records, ReminderFilter(query="REMEMBER"), clock)
        assert titles(result) == ["No date"]
        result = apply_filters(records, ReminderFilter(query="overdue"), clock)
        assert titles(result) == ["Done overdue", "Overdue task"]

    def test_filters_are_and_combined(self, records, clock):
        options = ReminderFilter(tag="work", has_url=True, priority="5")
        assert titles(apply_filters(records, options, clock)) == ["Future #work item"]

    def test_predicate_order_does_not_matter(self, records, clock):
        options = ReminderFilter(
            uncompleted_only=True, tag="work", due_after="2025-01-01", has_url=True
        )
        predicates = build_predicates(options, clock)
        expected = [r for r in records if combine(predicates)(r)]
        for order in itertools.permutations(predicates):
            assert [r for r in records if combine(order)(r)] == expected
