"""
Goal progress evaluation over an entry snapshot.

Every goal kind is a (window, metric) pair: the window picks entries from
today or from the current calendar week, the metric turns them into a
number (entries, distinct days, words).
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import pytz

from moodlens.core.models import Entry, Goal, GoalKind, GoalProgress
from moodlens.utils.calendar import local_day, to_local, week_interval

logger = logging.getLogger(__name__)


class GoalWindow(Enum):
    DAY = "day"
    WEEK = "week"


class GoalMetric(Enum):
    ENTRIES = "entries"
    DAYS = "days"
    WORDS = "words"


_GOAL_SHAPES: Dict[GoalKind, Tuple[GoalWindow, GoalMetric]] = {
    GoalKind.ENTRIES_TODAY: (GoalWindow.DAY, GoalMetric.ENTRIES),
    GoalKind.ENTRIES_THIS_WEEK: (GoalWindow.WEEK, GoalMetric.ENTRIES),
    GoalKind.DAYS_THIS_WEEK: (GoalWindow.WEEK, GoalMetric.DAYS),
    GoalKind.WORDS_TODAY: (GoalWindow.DAY, GoalMetric.WORDS),
    GoalKind.WORDS_THIS_WEEK: (GoalWindow.WEEK, GoalMetric.WORDS),
}


def word_count(text: str) -> int:
    """Number of non-empty whitespace-delimited tokens."""
    return len((text or "").split())


class GoalProgressEvaluator:
    """Computes progress of goals against a read-only entry snapshot."""

    def __init__(self, tz: Optional[pytz.BaseTzInfo] = None, first_weekday: int = 0):
        self.tz = tz or pytz.utc
        self.first_weekday = first_weekday

    def _window_entries(self, window: GoalWindow, entries: Sequence[Entry],
                        now: datetime) -> List[Entry]:
        today = local_day(now, self.tz)
        if window is GoalWindow.DAY:
            return [e for e in entries if local_day(e.timestamp, self.tz) == today]

        start, end = week_interval(today, self.first_weekday)
        return [e for e in entries if start <= local_day(e.timestamp, self.tz) < end]

    def _measure(self, metric: GoalMetric, entries: Sequence[Entry]) -> float:
        if metric is GoalMetric.ENTRIES:
            return float(len(entries))
        if metric is GoalMetric.DAYS:
            return float(len({local_day(e.timestamp, self.tz) for e in entries}))
        return float(sum(word_count(e.note) for e in entries))

    def evaluate(self, goal: Goal, entries: Sequence[Entry],
                 now: Optional[datetime] = None) -> GoalProgress:
        """
        Progress of a single goal.

        Args:
            goal: Goal to evaluate. Its target is used as-is.
            entries: Snapshot of all entries; never modified.
            now: Reference time (defaults to the current time in the local zone).

        Returns:
            GoalProgress with value, target and a "value/target unit" label.
        """
        now = to_local(now, self.tz) if now else datetime.now(self.tz)
        window, metric = _GOAL_SHAPES[goal.kind]

        value = self._measure(metric, self._window_entries(window, entries, now))
        label = f"{int(value)}/{int(goal.target)} {goal.kind.unit_label}"
        progress = GoalProgress(value=value, target=goal.target, label=label)

        logger.debug(f"[GOALS] {goal.kind.value}: {label} (complete={progress.is_complete})")
        return progress

    def evaluate_active(self, goals: Sequence[Goal], entries: Sequence[Entry],
                        now: Optional[datetime] = None) -> List[Tuple[Goal, GoalProgress]]:
        """Progress of active goals only, newest goal first."""
        active = sorted((g for g in goals if g.active), key=lambda g: g.created_at, reverse=True)
        return [(goal, self.evaluate(goal, entries, now)) for goal in active]
