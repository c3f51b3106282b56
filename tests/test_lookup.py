"""Tests for list and reminder lookup by name."""

import pytest

from reminder_engine.exceptions import NoListAvailableError, NotFoundError
from reminder_engine.lookup import (
    find_list,
    find_reminder,
    matching_lists,
    resolve_target_list,
    title_matches,
)
from reminder_engine.repository import InMemoryRepository


class TestLists:
    def test_matching_is_case_insensitive_substring(self, inbox, work, shopping):
        lists = [work, inbox, shopping]
        assert matching_lists(lists, "OP") == [shopping]
        assert matching_lists(lists, None) == lists
        assert matching_lists(lists, "zzz") == []

    def test_find_list_takes_first_in_enumeration_order(self, inbox, work):
        # both titles contain "o"
        assert find_list([work, inbox], "o") == work
        assert find_list([inbox, work], "o") == inbox

    def test_find_list_missing(self, inbox):
        with pytest.raises(NotFoundError) as exc_info:
            find_list([inbox], "Garden")
        assert exc_info.value.resource_type == "List"

    def test_target_list_resolution(self, inbox, work):
        assert resolve_target_list([work, inbox], inbox, "wor") == work
        assert resolve_target_list([work, inbox], inbox) == inbox
        assert resolve_target_list([work, inbox], None) == work

    def test_no_list_available(self):
        with pytest.raises(NoListAvailableError):
            resolve_target_list([], None)

    def test_named_target_must_exist(self, inbox):
        with pytest.raises(NotFoundError):
            resolve_target_list([inbox], inbox, "Garden")


class TestReminders:
    def test_title_containment(self, make_reminder):
        reminder = make_reminder("Buy #shopping milk")
        assert title_matches(reminder, "buy")
        assert title_matches(reminder, "Buy milk #shopping")
        assert not title_matches(reminder, "bread")

    def test_tag_only_query_needs_literal_match(self, make_reminder):
        reminder = make_reminder("Plan trip #travel")
        assert title_matches(reminder, "#travel")
        assert not title_matches(reminder, "#work")

    def test_find_reminder(self, repository):
        found = find_reminder(repository, "review")
        assert found.title == "Review PR"

    def test_find_reminder_scoped_to_list(self, repository):
        with pytest.raises(NotFoundError):
            find_reminder(repository, "Review", list_name="Inbox")

    def test_first_match_follows_list_order(self, clock, inbox, work, make_reminder):
        repo = InMemoryRepository(
            lists=[work, inbox],
            reminders=[
                make_reminder("Email Alice", reminder_list=inbox),
                make_reminder("Email Bob", reminder_list=work),
            ],
            clock=clock,
        )
        assert find_reminder(repo, "email").title == "Email Bob"

    def test_find_reminder_missing(self, repository):
        with pytest.raises(NotFoundError) as exc_info:
            find_reminder(repository, "Walk the dog")
        assert exc_info.value.resource_type == "Reminder"
        assert exc_info.value.resource_id == "Walk the dog"
