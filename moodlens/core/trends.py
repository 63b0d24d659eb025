"""
Trend statistics over a caller-provided entry snapshot.

All functions are pure: they never mutate the entries they are given and
use simple (unweighted) arithmetic means. Minimum-count thresholds for
charting are a display concern and are not enforced here.
"""

import logging
import statistics
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Sequence

import pytz

from moodlens.core.config import EngineConfig
from moodlens.core.models import Entry, ScoreBreakdown, Tag
from moodlens.core.scorer import WellBeingScorer
from moodlens.utils.calendar import (
    WEEKDAY_NAMES, local_day, local_hour, to_local, weekday_order
)

logger = logging.getLogger(__name__)


# ============================================================================
# BUCKETS & RANGES
# ============================================================================

class DayBucket(Enum):
    """Time-of-day buckets in canonical order."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


def bucket_for_hour(hour: int) -> DayBucket:
    cfg = EngineConfig
    if cfg.MORNING_START <= hour < cfg.AFTERNOON_START:
        return DayBucket.MORNING
    if cfg.AFTERNOON_START <= hour < cfg.EVENING_START:
        return DayBucket.AFTERNOON
    if cfg.EVENING_START <= hour < cfg.NIGHT_START:
        return DayBucket.EVENING
    return DayBucket.NIGHT


class RangeOption(Enum):
    WEEK = "7D"
    MONTH = "30D"
    QUARTER = "90D"

    @property
    def days(self) -> int:
        return EngineConfig.RANGE_OPTIONS[self.value]

    @property
    def title(self) -> str:
        return f"Last {self.days} days"

    @classmethod
    def from_days(cls, days: int) -> "RangeOption":
        for option in cls:
            if option.days == days:
                return option
        raise ValueError(f"No range option spans {days} days")


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True)
class DayPoint:
    day: date
    value: float
    count: int


@dataclass(frozen=True)
class BucketStat:
    bucket: DayBucket
    avg_mood: float
    count: int


@dataclass(frozen=True)
class WeekdayStat:
    weekday: int    # 0 = Monday
    avg_mood: float
    count: int

    @property
    def label(self) -> str:
        return WEEKDAY_NAMES[self.weekday][:3]


@dataclass(frozen=True)
class TagMoodStat:
    tag: Tag
    avg_mood: float
    count: int


@dataclass(frozen=True)
class KeywordStat:
    word: str
    count: int


# ============================================================================
# AGGREGATOR
# ============================================================================

class TrendAggregator:
    """Grouped statistics for trend views."""

    def __init__(self, scorer: Optional[WellBeingScorer] = None,
                 tz: Optional[pytz.BaseTzInfo] = None, first_weekday: int = 0):
        self.scorer = scorer or WellBeingScorer()
        self.tz = tz or pytz.utc
        self.first_weekday = first_weekday

    def _now(self, now: Optional[datetime]) -> datetime:
        return to_local(now, self.tz) if now else datetime.now(self.tz)

    # ------------------------------------------------------------------
    # Range filtering
    # ------------------------------------------------------------------

    def filter_range(self, entries: Sequence[Entry], days: int,
                     now: Optional[datetime] = None) -> List[Entry]:
        """Entries within [now - (days - 1) days, now], oldest first."""
        end = self._now(now)
        # calendar days, not fixed 24h spans
        start = self.tz.localize(end.replace(tzinfo=None) - timedelta(days=max(days, 1) - 1))
        in_range = [e for e in entries if start <= to_local(e.timestamp, self.tz) <= end]
        return sorted(in_range, key=lambda e: to_local(e.timestamp, self.tz))

    # ------------------------------------------------------------------
    # Mood averages
    # ------------------------------------------------------------------

    def daily_averages(self, entries: Sequence[Entry]) -> List[DayPoint]:
        groups: Dict[date, List[float]] = defaultdict(list)
        for entry in entries:
            groups[local_day(entry.timestamp, self.tz)].append(entry.mood)

        return [
            DayPoint(day=day, value=statistics.mean(moods), count=len(moods))
            for day, moods in sorted(groups.items())
        ]

    def time_of_day_averages(self, entries: Sequence[Entry]) -> List[BucketStat]:
        groups: Dict[DayBucket, List[float]] = defaultdict(list)
        for entry in entries:
            groups[bucket_for_hour(local_hour(entry.timestamp, self.tz))].append(entry.mood)

        return [
            BucketStat(bucket=bucket, avg_mood=statistics.mean(groups[bucket]), count=len(groups[bucket]))
            for bucket in DayBucket
            if groups.get(bucket)
        ]

    def weekday_averages(self, entries: Sequence[Entry]) -> List[WeekdayStat]:
        groups: Dict[int, List[float]] = defaultdict(list)
        for entry in entries:
            groups[local_day(entry.timestamp, self.tz).weekday()].append(entry.mood)

        return [
            WeekdayStat(weekday=weekday, avg_mood=statistics.mean(groups[weekday]), count=len(groups[weekday]))
            for weekday in weekday_order(self.first_weekday)
            if groups.get(weekday)
        ]

    def tag_mood_averages(self, entries: Sequence[Entry]) -> List[TagMoodStat]:
        """Per-tag mean mood, most used tag first, ties broken by higher mean then tag name."""
        groups: Dict[Tag, List[float]] = defaultdict(list)
        for entry in entries:
            for tag in set(entry.tags):
                groups[tag].append(entry.mood)

        stats = [
            TagMoodStat(tag=tag, avg_mood=statistics.mean(moods), count=len(moods))
            for tag, moods in groups.items()
        ]
        return sorted(stats, key=lambda s: (-s.count, -s.avg_mood, s.tag.value))

    # ------------------------------------------------------------------
    # Score trends
    # ------------------------------------------------------------------

    def rolling_average_score(self, entries: Sequence[Entry], days: int,
                              now: Optional[datetime] = None) -> Optional[float]:
        """Mean well-being total over the trailing window, or None if it holds no entries."""
        window = self.filter_range(entries, days, now)
        if not window:
            logger.debug(f"[TRENDS] No entries in trailing {days}-day window")
            return None
        return statistics.mean(self.scorer.total(entry) for entry in window)

    def daily_breakdown(self, entries: Sequence[Entry], day: Optional[date] = None,
                        now: Optional[datetime] = None) -> Optional[ScoreBreakdown]:
        """Averaged score breakdown of one local day (today by default)."""
        target = day or self._now(now).date()
        day_entries = [e for e in entries if local_day(e.timestamp, self.tz) == target]
        return self.scorer.average_breakdown(day_entries)

    # ------------------------------------------------------------------
    # Themes
    # ------------------------------------------------------------------

    def _newest_first(self, entries: Sequence[Entry]) -> List[Entry]:
        return sorted(entries, key=lambda e: to_local(e.timestamp, self.tz), reverse=True)

    def recent_keyword_stats(self, entries: Sequence[Entry],
                             limit: int = EngineConfig.RECENT_KEYWORD_ENTRIES,
                             top: int = EngineConfig.RECENT_KEYWORD_TOP) -> List[KeywordStat]:
        """Keyword counts over the most recent entries, most frequent first."""
        counts: Counter = Counter()
        for entry in self._newest_first(entries)[:limit]:
            counts.update(entry.derived.keywords)

        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [KeywordStat(word=word, count=count) for word, count in ranked[:top]]

    def entries_matching_keyword(self, entries: Sequence[Entry], keyword: str) -> List[Entry]:
        wanted = keyword.lower()
        matching = [e for e in entries if any(k.lower() == wanted for k in e.derived.keywords)]
        return self._newest_first(matching)
