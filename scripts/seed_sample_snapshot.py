#!/usr/bin/env python3
"""
Writes a sample journal snapshot so the report has something to show.
Entries are placed relative to the current local time.
Usage: python scripts/seed_sample_snapshot.py [output.json]
"""

import json
import os
import sys
from datetime import datetime, timedelta

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from moodlens.core.models import Context, Entry, Goal, GoalKind, Tag

DEFAULT_OUTPUT = "sample_snapshot.json"

# (days ago, hour, minute, mood, energy, stress, tags, note)
SAMPLES = [
    (0, 21, 10, 7.5, 5.5, 3.0, [Tag.FRIENDS, Tag.GRATEFUL], "Talked with a friend. Felt lighter after sharing."),
    (1, 9, 5, 6.0, 6.5, 4.0, [Tag.SCHOOL], "Busy day ahead. Trying to stay steady."),
    (2, 23, 30, 4.5, 3.0, 7.5, [Tag.WORK, Tag.ANXIOUS], "Deadlines piled up. I can feel it in my shoulders."),
    (3, 18, 20, 6.8, 6.2, 3.8, [Tag.EXERCISE], "A short walk helped reset my mood."),
    (4, 8, 40, 5.2, 4.0, 5.8, [Tag.SLEEP], "Woke up a few times. Going to take it slow."),
    (5, 14, 15, 7.0, 7.2, 3.5, [Tag.CREATIVITY], "Made progress on something I care about."),
    (6, 20, 45, 6.1, 5.0, 4.6, [Tag.FAMILY], "Dinner at home. Comforting and warm."),
    (7, 10, 0, 5.8, 6.0, 4.2, [Tag.OUTDOORS], "Sunlight and fresh air, even briefly, makes a difference."),
]

SAMPLE_CONTEXT = {0: Context(rest_hours=7.5, activity_count=8200), 3: Context(rest_hours=6.0, activity_count=11500)}


def build_snapshot(now: datetime) -> dict:
    entries = []
    for days_ago, hour, minute, mood, energy, stress, tags, note in SAMPLES:
        day = now - timedelta(days=days_ago)
        timestamp = day.replace(hour=hour, minute=minute, second=0, microsecond=0)
        entries.append(Entry(
            timestamp=timestamp, mood=mood, energy=energy, stress=stress,
            tags=tuple(tags), note=note, context=SAMPLE_CONTEXT.get(days_ago)
        ))

    goals = [
        Goal.create(GoalKind.ENTRIES_THIS_WEEK, created_at=now),
        Goal.create(GoalKind.WORDS_TODAY, target=50, created_at=now),
    ]
    return {
        'entries': [entry.to_dict() for entry in sorted(entries, key=lambda e: e.timestamp, reverse=True)],
        'goals': [goal.to_dict() for goal in goals],
    }


def main():
    output = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_OUTPUT
    with open(output, 'w', encoding='utf-8') as f:
        json.dump(build_snapshot(datetime.now()), f, indent=2)
    print(f"✅ Sample snapshot written to {output}")


if __name__ == "__main__":
    main()
