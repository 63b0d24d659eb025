import pytest
import pytz
from datetime import datetime, timedelta

from moodlens.core.goals import GoalProgressEvaluator, _GOAL_SHAPES, word_count
from moodlens.core.models import Goal, GoalKind


def _goal(kind, target, **kwargs):
    return Goal(title=kind.display_name, kind=kind, target=target, **kwargs)


class TestGoalProgressEvaluator:
    """Test suite for goal windows and metrics."""

    def setup_method(self):
        self.evaluator = GoalProgressEvaluator()

    # ========================================================================
    # 1. ENTRIES TODAY
    # ========================================================================

    def test_entries_today_partial(self, make_entry, fixed_now):
        entries = [
            make_entry(timestamp=fixed_now.replace(hour=8)),
            make_entry(timestamp=fixed_now.replace(hour=12)),
            make_entry(timestamp=fixed_now - timedelta(days=1)),
        ]
        progress = self.evaluator.evaluate(_goal(GoalKind.ENTRIES_TODAY, 3), entries, fixed_now)

        assert progress.value == 2
        assert progress.fraction == pytest.approx(2 / 3)
        assert progress.is_complete is False
        assert progress.label == "2/3 entries"

    def test_entries_today_complete(self, make_entry, fixed_now):
        entries = [make_entry(timestamp=fixed_now.replace(hour=h)) for h in (7, 9, 23)]
        progress = self.evaluator.evaluate(_goal(GoalKind.ENTRIES_TODAY, 3), entries, fixed_now)

        assert progress.value == 3
        assert progress.fraction == 1.0
        assert progress.is_complete is True

    def test_fraction_capped_at_one(self, make_entry, fixed_now):
        entries = [make_entry(timestamp=fixed_now) for _ in range(5)]
        progress = self.evaluator.evaluate(_goal(GoalKind.ENTRIES_TODAY, 2), entries, fixed_now)
        assert progress.fraction == 1.0

    # ========================================================================
    # 2. WEEK WINDOWS
    # ========================================================================

    def test_entries_this_week_monday_start(self, make_entry, fixed_now):
        entries = [
            make_entry(timestamp=datetime(2026, 10, 11, 22, 0)),  # Sunday, previous week
            make_entry(timestamp=datetime(2026, 10, 12, 0, 5)),   # Monday
            make_entry(timestamp=datetime(2026, 10, 14, 9, 0)),   # Wednesday
            make_entry(timestamp=datetime(2026, 10, 19, 0, 0)),   # next Monday
        ]
        progress = self.evaluator.evaluate(_goal(GoalKind.ENTRIES_THIS_WEEK, 5), entries, fixed_now)
        assert progress.value == 2

    def test_entries_this_week_sunday_start(self, make_entry, fixed_now):
        evaluator = GoalProgressEvaluator(first_weekday=6)
        entries = [
            make_entry(timestamp=datetime(2026, 10, 11, 22, 0)),  # Sunday, same week
            make_entry(timestamp=datetime(2026, 10, 17, 23, 0)),  # Saturday
            make_entry(timestamp=datetime(2026, 10, 18, 8, 0)),   # next Sunday
        ]
        progress = evaluator.evaluate(_goal(GoalKind.ENTRIES_THIS_WEEK, 5), entries, fixed_now)
        assert progress.value == 2

    def test_days_journaled_counts_distinct_days(self, make_entry):
        entries = [
            make_entry(timestamp=datetime(2026, 10, 12, 8, 0)),
            make_entry(timestamp=datetime(2026, 10, 12, 21, 0)),
            make_entry(timestamp=datetime(2026, 10, 13, 10, 0)),
        ]
        progress = self.evaluator.evaluate(_goal(GoalKind.DAYS_THIS_WEEK, 4), entries,
                                           datetime(2026, 10, 14, 15, 0))
        assert progress.value == 2
        assert progress.label == "2/4 days"

    # ========================================================================
    # 3. WORD GOALS
    # ========================================================================

    def test_words_today(self, make_entry, fixed_now):
        entries = [
            make_entry(timestamp=fixed_now, note="one two three"),
            make_entry(timestamp=fixed_now, note="  four \n\t five "),
            make_entry(timestamp=fixed_now - timedelta(days=1), note="ignored words here"),
        ]
        progress = self.evaluator.evaluate(_goal(GoalKind.WORDS_TODAY, 150), entries, fixed_now)
        assert progress.value == 5

    def test_words_this_week(self, make_entry, fixed_now):
        entries = [
            make_entry(timestamp=datetime(2026, 10, 12, 8, 0), note="alpha beta"),
            make_entry(timestamp=fixed_now, note="gamma"),
            make_entry(timestamp=datetime(2026, 10, 5, 8, 0), note="last week words"),
        ]
        progress = self.evaluator.evaluate(_goal(GoalKind.WORDS_THIS_WEEK, 100), entries, fixed_now)
        assert progress.value == 3

    @pytest.mark.parametrize("text,expected", [("", 0), ("   ", 0), ("a b  c", 3), ("one\ntwo", 2)])
    def test_word_count(self, text, expected):
        assert word_count(text) == expected

    # ========================================================================
    # 4. EDGE CASES
    # ========================================================================

    @pytest.mark.parametrize("kind", list(GoalKind))
    def test_empty_collection(self, kind, fixed_now):
        progress = self.evaluator.evaluate(_goal(kind, kind.default_target), [], fixed_now)
        assert progress.value == 0
        assert progress.fraction == 0
        assert progress.is_complete is False

    def test_zero_target_never_complete(self, make_entry, fixed_now):
        progress = self.evaluator.evaluate(_goal(GoalKind.ENTRIES_TODAY, 0), [make_entry()], fixed_now)
        assert progress.fraction == 0
        assert progress.is_complete is False

    def test_every_kind_has_a_shape(self):
        assert set(_GOAL_SHAPES) == set(GoalKind)

    def test_local_timezone_day_boundary(self, make_entry):
        tz = pytz.timezone("America/New_York")
        now = tz.localize(datetime(2026, 10, 14, 18, 0))
        # 01:00 UTC on the 15th is 21:00 on the 14th in New York
        entry = make_entry(timestamp=datetime(2026, 10, 15, 1, 0, tzinfo=pytz.utc))
        goal = _goal(GoalKind.ENTRIES_TODAY, 1)

        assert GoalProgressEvaluator(tz=tz).evaluate(goal, [entry], now).is_complete is True
        assert GoalProgressEvaluator().evaluate(goal, [entry], now).value == 0

    # ========================================================================
    # 5. ACTIVE GOALS
    # ========================================================================

    def test_evaluate_active_skips_inactive_newest_first(self, make_entry, fixed_now):
        older = _goal(GoalKind.ENTRIES_TODAY, 1, created_at=datetime(2026, 1, 1))
        newer = _goal(GoalKind.WORDS_TODAY, 25, created_at=datetime(2026, 6, 1))
        paused = _goal(GoalKind.DAYS_THIS_WEEK, 3, active=False, created_at=datetime(2026, 9, 1))

        results = self.evaluator.evaluate_active([older, paused, newer], [make_entry()], fixed_now)

        assert [goal.id for goal, _ in results] == [newer.id, older.id]
        assert results[1][1].is_complete is True
