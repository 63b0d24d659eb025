"""
Read-only loader for exported journal snapshots.

A snapshot is a JSON document {"entries": [...], "goals": [...]} using the
persisted entry and goal shapes. Writing snapshots belongs to the storage
layer and is not done here.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from moodlens.core.models import Entry, Goal, SnapshotFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    entries: List[Entry] = field(default_factory=list)
    goals: List[Goal] = field(default_factory=list)


def parse_snapshot(data: Dict[str, Any]) -> Snapshot:
    """
    Builds model objects from a decoded snapshot document.

    Raises:
        SnapshotFormatError: If the document or any record is malformed.
    """
    if not isinstance(data, dict):
        raise SnapshotFormatError("Snapshot root must be an object")

    raw_entries = data.get('entries', [])
    raw_goals = data.get('goals', [])
    if not isinstance(raw_entries, list) or not isinstance(raw_goals, list):
        raise SnapshotFormatError("'entries' and 'goals' must be lists")

    entries = [Entry.from_dict(record) for record in raw_entries]
    goals = [Goal.from_dict(record) for record in raw_goals]
    logger.info(f"Loaded snapshot: {len(entries)} entries, {len(goals)} goals")
    return Snapshot(entries=entries, goals=goals)


def load_snapshot(path: str) -> Snapshot:
    """
    Reads a snapshot file.

    Raises:
        FileNotFoundError: If path does not exist.
        SnapshotFormatError: If the file is not valid snapshot JSON.
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotFormatError(f"Invalid JSON in {path}: {e}") from e
    return parse_snapshot(data)
