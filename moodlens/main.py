"""
Journal Insights: offline report over an exported journal snapshot.

This module wires the analytics engine together for a single read-only run:
1. Loads a snapshot of entries and goals
2. Re-derives text signals from each note (in memory only)
3. Scores today's entries and computes trends for the chosen range
4. Evaluates active goals and recurring themes

The snapshot file is never written back.
"""

import os
import sys
import argparse
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv

# Add project root for nested imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from moodlens.adapters.snapshot import Snapshot, load_snapshot
from moodlens.core.config import SIGNAL_BACKENDS, RuntimeSettings
from moodlens.core.goals import GoalProgressEvaluator
from moodlens.core.models import Entry, SnapshotFormatError, UnknownLabelError, parse_timestamp
from moodlens.core.signals import TextSignalExtractor, resolve_backend
from moodlens.core.trends import RangeOption, TrendAggregator
from moodlens.utils.logger import setup_logger

logger = logging.getLogger(__name__)

ROLLING_WINDOW_DAYS = 7


# ============================================================================
# ARGUMENT PARSING
# ============================================================================

def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Journal Insights: well-being score, trends and goals from a journal snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py --snapshot journal.json                  # Last 30 days
  python run.py --snapshot journal.json --range 7        # Last 7 days
  python run.py --snapshot journal.json --backend heuristic
        """
    )

    parser.add_argument("--snapshot", required=True, help="Path to the exported journal JSON")
    parser.add_argument(
        "--range",
        type=int,
        choices=[option.days for option in RangeOption],
        default=RangeOption.MONTH.days,
        help="Trend range in days (default: 30)"
    )
    parser.add_argument(
        "--backend",
        choices=list(SIGNAL_BACKENDS),
        default=None,
        help="Text signal backend (default: MOODLENS_SIGNAL_BACKEND or auto)"
    )
    parser.add_argument("--now", default=None, help="Reference time as ISO 8601 (default: current time)")

    return parser.parse_args(argv)


# ============================================================================
# REPORT
# ============================================================================

def derive_signals(entries: Sequence[Entry], extractor: TextSignalExtractor) -> List[Entry]:
    """Re-derives signals for every entry so stored values from an older backend are ignored."""
    return [entry.with_derived(extractor.derive(entry.note)) for entry in entries]


def build_report(snapshot: Snapshot, settings: RuntimeSettings, extractor: TextSignalExtractor,
                 range_days: int, now: datetime) -> Dict[str, Any]:
    tz = settings.tzinfo
    aggregator = TrendAggregator(tz=tz, first_weekday=settings.first_weekday)
    evaluator = GoalProgressEvaluator(tz=tz, first_weekday=settings.first_weekday)

    entries = derive_signals(snapshot.entries, extractor)
    in_range = aggregator.filter_range(entries, range_days, now)

    return {
        'range': RangeOption.from_days(range_days),
        'entry_count': len(in_range),
        'today': aggregator.daily_breakdown(entries, now=now),
        'daily': aggregator.daily_averages(in_range),
        'time_of_day': aggregator.time_of_day_averages(in_range),
        'weekday': aggregator.weekday_averages(in_range),
        'tags': aggregator.tag_mood_averages(in_range),
        'rolling_score': aggregator.rolling_average_score(entries, ROLLING_WINDOW_DAYS, now),
        'goals': evaluator.evaluate_active(snapshot.goals, entries, now),
        'themes': aggregator.recent_keyword_stats(entries),
    }


def format_report(report: Dict[str, Any]) -> str:
    lines = [
        f"JOURNAL INSIGHTS ({report['range'].title}, {report['entry_count']} entries)",
        "=" * 40,
    ]

    today = report['today']
    if today is None:
        lines.append("[TODAY]    Write an entry today to generate your daily score.")
    else:
        lines.append(f"[TODAY]    {today.total:.0f}/100 from {today.entry_count} entries")
        for component in today.components:
            lines.append(f"  {component.title:<14} {component.describe():<26} {component.points_text()}")

    if report['daily']:
        latest = report['daily'][-1]
        lines.append(f"[DAILY]    {len(report['daily'])} days, latest {latest.value:.1f} on {latest.day.isoformat()}")
    lines.append("[TIME]     " + (" | ".join(
        f"{s.bucket.display_name} {s.avg_mood:.1f}" for s in report['time_of_day']) or "N/A"))
    lines.append("[WEEKDAY]  " + (" | ".join(
        f"{s.label} {s.avg_mood:.1f}" for s in report['weekday']) or "N/A"))
    lines.append("[TAGS]     " + (" | ".join(
        f"{s.tag.display_name} ({s.count}) {s.avg_mood:.1f}" for s in report['tags'][:6]) or "N/A"))

    rolling = report['rolling_score']
    rolling_text = f"{rolling:.1f}" if rolling is not None else "N/A"
    lines.append(f"[ROLLING]  {ROLLING_WINDOW_DAYS}-day average score: {rolling_text}")

    for goal, progress in report['goals']:
        status = "done" if progress.is_complete else f"{progress.fraction:.0%}"
        lines.append(f"[GOAL]     {goal.title}: {progress.label} ({status})")

    lines.append("[THEMES]   " + (", ".join(
        f"{k.word} ({k.count})" for k in report['themes']) or "N/A"))
    return "\n".join(lines)


# ============================================================================
# MAIN
# ============================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = parse_arguments(argv)
    settings = RuntimeSettings.from_env()
    setup_logger("moodlens", level=settings.log_level, log_dir=settings.log_dir)

    try:
        now = parse_timestamp(args.now) if args.now else datetime.now(settings.tzinfo)
    except SnapshotFormatError as e:
        logger.error(f"Invalid --now value: {e}")
        return 2

    try:
        snapshot = load_snapshot(args.snapshot)
    except FileNotFoundError:
        logger.error(f"Snapshot not found: {args.snapshot}")
        return 1
    except (SnapshotFormatError, UnknownLabelError) as e:
        logger.error(f"Invalid snapshot: {e}")
        return 2

    try:
        backend = resolve_backend(args.backend or settings.signal_backend)
    except OSError as e:
        logger.error(f"Signal backend unavailable: {e}")
        return 1

    extractor = TextSignalExtractor(backend)
    report = build_report(snapshot, settings, extractor, args.range, now)
    logger.info(f"Report:\n{format_report(report)}")
    return 0
