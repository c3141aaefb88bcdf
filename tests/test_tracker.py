"""Tests for the UI-facing tracker facade."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import select

from habitstreak.errors import ConnectivityError, ValidationError
from habitstreak.models import Habit, HabitLog
from habitstreak.services.tracker import HabitWithStats
from helpers import TODAY, days_ago


class TestHabitDefinitions:
    def test_add_habit_strips_and_stores(self, tracker):
        habit = tracker.add_habit("  Drink water  ", "  8 glasses ")

        stored = tracker.get_habit(habit.id)
        assert stored.name == "Drink water"
        assert stored.description == "8 glasses"
        assert stored.created_at is not None and stored.updated_at is not None

    def test_blank_description_is_stored_as_none(self, tracker):
        habit = tracker.add_habit("Walk", "   ")
        assert tracker.get_habit(habit.id).description is None

    @pytest.mark.parametrize("name", ["", "   ", None, "x" * 81])
    def test_invalid_names_are_rejected_before_the_store(self, tracker, habit_repo, name):
        with pytest.raises(ValidationError):
            tracker.add_habit(name)
        assert habit_repo.list_all() == []

    def test_too_long_description_rejected(self, tracker):
        with pytest.raises(ValidationError):
            tracker.add_habit("Walk", "d" * 256)

    def test_rename_habit(self, tracker):
        habit = tracker.add_habit("Run")
        renamed = tracker.rename_habit(habit.id, name="Run 5k", description="Before work")

        assert renamed.name == "Run 5k"
        assert renamed.description == "Before work"
        assert renamed.updated_at >= renamed.created_at

    def test_rename_keeps_untouched_fields(self, tracker):
        habit = tracker.add_habit("Run", "Easy pace")
        renamed = tracker.rename_habit(habit.id, name="Jog")
        assert renamed.description == "Easy pace"

    def test_rename_unknown_habit_returns_none(self, tracker):
        assert tracker.rename_habit("missing", name="Anything") is None

    def test_rename_validates(self, tracker):
        habit = tracker.add_habit("Run")
        with pytest.raises(ValidationError):
            tracker.rename_habit(habit.id, name=" ")

    def test_get_unknown_habit_returns_none(self, tracker):
        assert tracker.get_habit("missing") is None

    def test_delete_cascades_to_logs(self, tracker, log_factory, db_session):
        habit = tracker.add_habit("Floss")
        keep = tracker.add_habit("Read")
        for i in range(3):
            log_factory(habit.id, days_ago(i))
        log_factory(keep.id, TODAY)

        assert tracker.delete_habit(habit.id) is True

        db_session.expire_all()
        assert db_session.get(Habit, habit.id) is None
        orphans = db_session.exec(select(HabitLog).where(HabitLog.habit_id == habit.id)).all()
        assert orphans == []
        assert len(tracker.get_history(keep.id)) == 1

    def test_delete_unknown_habit_returns_false(self, tracker):
        assert tracker.delete_habit("missing") is False


class TestListHabitsWithStats:
    def test_empty(self, tracker):
        assert tracker.list_habits_with_stats() == []

    def test_stats_per_habit(self, tracker, db_session, log_factory):
        base = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
        older = Habit(id="older", name="Meditate", created_at=base, updated_at=base)
        newer = Habit(
            id="newer",
            name="Stretch",
            created_at=base + timedelta(days=1),
            updated_at=base + timedelta(days=1),
        )
        db_session.add(older)
        db_session.add(newer)
        db_session.commit()

        for i in range(4):
            log_factory("older", days_ago(i))
        log_factory("newer", TODAY, completed=False)
        log_factory("newer", days_ago(1))

        stats = tracker.list_habits_with_stats()

        assert [s.id for s in stats] == ["newer", "older"]
        assert stats[0] == HabitWithStats(
            id="newer",
            name="Stretch",
            description=None,
            created_at=stats[0].created_at,
            updated_at=stats[0].updated_at,
            streak=1,
            completed_today=False,
        )
        assert stats[1].streak == 4
        assert stats[1].completed_today is True


class TestToggleCompletion:
    def test_toggle_flips_state(self, tracker):
        habit = tracker.add_habit("Push-ups")

        assert tracker.toggle_completion(habit.id) is True
        assert tracker.toggle_completion(habit.id) is False
        assert tracker.toggle_completion(habit.id) is True

        history = tracker.get_history(habit.id)
        assert len(history) == 1
        assert history[0].log_date == TODAY
        assert history[0].completed is True

    def test_toggle_updates_streak(self, tracker, log_factory):
        habit = tracker.add_habit("Read")
        log_factory(habit.id, days_ago(1))
        log_factory(habit.id, days_ago(2))

        assert tracker.get_streak(habit.id) == 2
        tracker.toggle_completion(habit.id)
        assert tracker.get_streak(habit.id) == 3
        tracker.toggle_completion(habit.id)
        assert tracker.get_streak(habit.id) == 2

    def test_toggle_keeps_notes(self, tracker):
        habit = tracker.add_habit("Read")
        tracker.log_habit(habit.id, True, "chapter 3")

        tracker.toggle_completion(habit.id)

        log = tracker.get_history(habit.id)[0]
        assert log.completed is False
        assert log.notes == "chapter 3"

    def test_toggle_unknown_habit_returns_none(self, tracker):
        assert tracker.toggle_completion("missing") is None

    def test_toggle_surfaces_connectivity_errors(self, tracker, db_engine):
        habit = tracker.add_habit("Read")
        with db_engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE habit_logs")

        with pytest.raises(ConnectivityError):
            tracker.toggle_completion(habit.id)


class TestHistory:
    def test_history_newest_first(self, tracker, log_factory):
        habit = tracker.add_habit("Read")
        for n in (3, 0, 7, 1):
            log_factory(habit.id, days_ago(n))

        history = tracker.get_history(habit.id)
        assert [log.log_date for log in history] == [days_ago(n) for n in (0, 1, 3, 7)]

    def test_history_same_on_compound_path(self, tracker, log_factory, indexed):
        habit = tracker.add_habit("Read")
        for n in (3, 0, 7, 1):
            log_factory(habit.id, days_ago(n))

        history = tracker.get_history(habit.id)
        assert [log.log_date for log in history] == [days_ago(n) for n in (0, 1, 3, 7)]
