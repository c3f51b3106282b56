"""Tests for ReminderService commands over the in-memory repository."""

from datetime import datetime

import pytest

from reminder_engine.exceptions import NoListAvailableError, NotFoundError, StoreError
from reminder_engine.filters import ReminderFilter
from reminder_engine.models import (
    Frequency,
    LocationTrigger,
    OperationStatus,
    PriorityBand,
    ReminderList,
)
from reminder_engine.repository import InMemoryRepository
from reminder_engine.service import ReminderService, _build_repository


class FlakyRepository(InMemoryRepository):
    """Rejects writes of the titles in ``fail_titles``."""

    fail_titles: frozenset[str] = frozenset()

    def save(self, reminder):
        if reminder.title in self.fail_titles:
            raise StoreError("Failed to save reminder", domain="EKErrorDomain", code=1)
        return super().save(reminder)


def titles(reminders):
    return [r.title for r in reminders]


class TestLists:
    def test_list_lists_with_counts(self, service):
        summaries = service.list_lists()
        assert [s.reminder_list.title for s in summaries] == ["Inbox", "Shopping", "Work"]
        assert [(s.total, s.completed) for s in summaries] == [(2, 1), (1, 0), (2, 0)]

    def test_create_and_delete_list(self, service):
        garden = service.create_list("Garden", "0a0")
        assert garden.color == "#00AA00"
        service.create("Plant tulips", list_name="Garden")

        deleted = service.delete_list("gard")
        assert deleted.id == garden.id
        assert "Garden" not in [s.reminder_list.title for s in service.list_lists()]

    def test_delete_missing_list(self, service):
        with pytest.raises(NotFoundError):
            service.delete_list("Garden")


class TestReads:
    def test_sections_sorted_by_list_title(self, service):
        sections = service.list_reminders()
        assert [s.reminder_list.title for s in sections] == ["Inbox", "Shopping", "Work"]
        assert titles(sections[0].reminders) == ["Call mom", "Pay rent"]
        assert titles(sections[2].reminders) == ["Write report #work", "Review PR"]

    def test_single_list_with_filter(self, service):
        sections = service.list_reminders("inbox", ReminderFilter(uncompleted_only=True))
        assert len(sections) == 1
        assert titles(sections[0].reminders) == ["Call mom"]

    def test_unknown_list(self, service):
        with pytest.raises(NotFoundError):
            service.list_reminders("Garden")

    def test_search_ranks_across_lists(self, service):
        results = service.search(ReminderFilter(uncompleted_only=True))
        assert titles(results) == [
            "Write report #work",
            "Review PR",
            "Buy milk #groceries",
            "Call mom",
        ]

    def test_search_pagination(self, service):
        results = service.search(ReminderFilter(), limit=2, offset=1)
        assert titles(results) == ["Review PR", "Buy milk #groceries"]

    def test_search_overdue(self, service):
        results = service.search(ReminderFilter(overdue=True))
        assert titles(results) == ["Review PR", "Buy milk #groceries"]

    def test_search_by_tag_includes_notes(self, service):
        assert titles(service.search(ReminderFilter(tag="family"))) == ["Call mom"]

    def test_search_unknown_list_is_empty(self, service):
        assert service.search(ReminderFilter(), list_name="Garden") == []

    def test_show(self, service):
        details = service.show("buy milk")
        assert details.reminder.title == "Buy milk #groceries"
        assert details.priority_band is PriorityBand.NONE
        assert details.priority_glyph == ""
        assert details.is_overdue
        assert details.tags == ["groceries"]
        assert details.subtasks == []

    def test_show_high_priority(self, service):
        details = service.show("report")
        assert details.priority_band is PriorityBand.HIGH
        assert details.priority_glyph == "!!!"
        assert not details.is_overdue

    def test_stats_scoped_to_list(self, service):
        stats = service.stats("work")
        assert stats.list_count == 1
        assert stats.total == 2
        assert stats.overdue == 1

    def test_tags(self, service):
        assert [t.tag for t in service.tags()] == ["family", "groceries", "work"]


class TestCreate:
    def test_create_in_default_list(self, service):
        result = service.create("Buy milk #shopping #urgent", due_date="2025-01-15")
        assert result.status is OperationStatus.CREATED
        assert result.reminder.id
        assert result.reminder.reminder_list.title == "Inbox"
        assert result.reminder.due_date == datetime(2025, 1, 15)
        assert service.show("urgent").reminder.id == result.reminder.id

    def test_create_with_negative_alarm_offset(self, service):
        result = service.create("Stretch", due_date="2025-01-20", alarm_minutes_before=-15)
        assert result.status is OperationStatus.CREATED
        assert result.ignored_fields == ["alarm_minutes_before"]
        assert service.show("Stretch").reminder.alarms == []

    def test_create_in_named_list(self, service):
        result = service.create("Bread", list_name="shop")
        assert result.reminder.reminder_list.title == "Shopping"

    def test_create_reports_ignored_fields(self, service):
        result = service.create("Bread", priority="urgent", alarm_minutes_before=5)
        assert result.status is OperationStatus.CREATED
        assert result.ignored_fields == ["priority", "alarm_minutes_before"]

    def test_create_without_lists(self, clock):
        service = ReminderService(InMemoryRepository(clock=clock), clock)
        with pytest.raises(NoListAvailableError):
            service.create("Orphan")

    def test_create_falls_back_to_first_list(self, clock):
        first = ReminderList(id="a", title="Alpha")
        repo = InMemoryRepository(lists=[first, ReminderList(id="b", title="Beta")], clock=clock)
        result = ReminderService(repo, clock).create("Task")
        assert result.reminder.reminder_list == first

    def test_create_many(self, service):
        batch = service.create_many(["One", "Two"], list_name="Work")
        assert batch.all_succeeded
        assert batch.successes == 2
        assert len(service.search(ReminderFilter(), list_name="Work")) == 4


class TestUpdate:
    def test_update_persists(self, service):
        result = service.update("Review", priority="low", due_date="none")
        assert result.status is OperationStatus.UPDATED
        stored = service.show("Review PR").reminder
        assert stored.priority == 9
        assert stored.due_date is None

    def test_no_changes_does_not_save(self, service):
        before = service.show("Review").reminder.last_modified_date
        service.clock.advance(minutes=5)
        result = service.update("Review")
        assert result.status is OperationStatus.NO_CHANGES
        assert service.show("Review").reminder.last_modified_date == before

    def test_move_via_update(self, service):
        service.update("Call mom", move_to_list="Work")
        assert service.show("Call mom").reminder.reminder_list.title == "Work"

    def test_move(self, service):
        result = service.move("Call mom", "Shop")
        assert result.status is OperationStatus.UPDATED
        section = service.list_reminders("Shopping")[0]
        assert "Call mom" in titles(section.reminders)

    def test_update_missing_reminder(self, service):
        with pytest.raises(NotFoundError):
            service.update("Walk the dog", title="Walk")


class TestBatch:
    def test_complete_continues_after_failure(self, service, clock):
        batch = service.complete(["Review", "Walk the dog", "Pay rent"])
        assert batch.successes == 2
        assert batch.failures == 1
        assert batch.failed_names == ["Walk the dog"]
        assert [r.status for r in batch.results] == [
            OperationStatus.COMPLETED,
            OperationStatus.FAILED,
            OperationStatus.ALREADY_COMPLETED,
        ]
        review = service.show("Review").reminder
        assert review.is_completed
        assert review.completion_date == clock.now()

    def test_store_failure_is_recorded(self, clock, inbox, work, make_reminder):
        repo = FlakyRepository(
            lists=[inbox, work],
            reminders=[make_reminder("Alpha"), make_reminder("Beta")],
            clock=clock,
        )
        repo.fail_titles = frozenset({"Alpha"})
        service = ReminderService(repo, clock)

        batch = service.complete(["Alpha", "Beta"])
        assert batch.failed_names == ["Alpha"]
        assert "Failed to save reminder" in batch.errors[0]
        assert batch.successes == 1
        assert not service.show("Alpha").reminder.is_completed
        assert service.show("Beta").reminder.is_completed

    def test_delete(self, service):
        batch = service.delete(["Call mom", "Call mom"])
        assert batch.successes == 1
        assert batch.failures == 1
        with pytest.raises(NotFoundError):
            service.show("Call mom")


class TestAttachments:
    def test_alarm_lifecycle(self, service):
        added = service.add_alarm("report", minutes_before=30)
        assert added.status is OperationStatus.UPDATED
        service.add_alarm("report", absolute_date="2025-01-19 09:00")
        assert len(service.show("report").reminder.alarms) == 2

        removed = service.remove_alarms("report")
        assert removed.count == 2
        assert service.show("report").reminder.alarms == []

    def test_relative_alarm_without_due_date(self, service):
        result = service.add_alarm("Call mom", minutes_before=10)
        assert result.status is OperationStatus.INVALID_INPUT
        assert service.show("Call mom").reminder.alarms == []

    def test_location(self, service):
        trigger = LocationTrigger(title="Office", latitude=37.33, longitude=-122.03)
        service.add_location("report", trigger)
        assert service.show("report").reminder.alarms[0].location == trigger
        assert service.remove_location("report").count == 1

    def test_recurrence_with_bad_end_date(self, service):
        result = service.add_recurrence(
            "Pay rent", Frequency.MONTHLY, end_date="whenever"
        )
        assert result.ignored_fields == ["end_date"]
        rule = service.show("Pay rent").reminder.recurrence_rules[0]
        assert rule.is_unbounded

    def test_negative_alarm_offset_is_invalid(self, service):
        result = service.add_alarm("report", minutes_before=-5)
        assert result.status is OperationStatus.INVALID_INPUT
        assert service.show("report").reminder.alarms == []

    @pytest.mark.parametrize(
        "interval, end_date, occurrence_count",
        [(1, "2025-02-01", 3), (0, None, None)],
    )
    def test_invalid_recurrence_is_reported(
        self, service, interval, end_date, occurrence_count
    ):
        result = service.add_recurrence(
            "report",
            Frequency.DAILY,
            interval=interval,
            end_date=end_date,
            occurrence_count=occurrence_count,
        )
        assert result.status is OperationStatus.INVALID_INPUT
        assert not result.changed
        assert service.show("report").reminder.recurrence_rules == []

    def test_recurrence_end_date(self, service):
        service.add_recurrence("Pay rent", Frequency.MONTHLY, end_date="2025-12-31")
        rule = service.show("Pay rent").reminder.recurrence_rules[0]
        assert rule.end_date == datetime(2025, 12, 31)
        assert service.remove_recurrence("Pay rent").count == 1

    def test_tag_and_subtask(self, service):
        assert service.add_tag("Call mom", "family").status is OperationStatus.UPDATED
        assert service.add_tag("Call mom", "family").status is OperationStatus.ALREADY_EXISTS
        service.add_subtask("Call mom", "Check flights")
        details = service.show("Call mom")
        assert details.reminder.title == "Call mom #family"
        assert [s.text for s in details.subtasks] == ["Check flights"]


class TestInstance:
    def test_memory_backend(self):
        repo = _build_repository("memory")
        assert repo.default_list().title == "Reminders"

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            _build_repository("sqlite")

    def test_get_instance_is_shared(self):
        ReminderService.set_instance(None)
        try:
            first = ReminderService.get_instance(backend="memory")
            assert ReminderService.get_instance() is first
        finally:
            ReminderService.set_instance(None)
