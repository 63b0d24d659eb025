"""
Domain models for journal entries, goals and score breakdowns.

All models are immutable: the engine computes new values and hands them
back to the caller, which owns storage. Persisted shapes are produced and
consumed through to_dict/from_dict on Entry and Goal.
"""

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from moodlens.core.config import EngineConfig


# ============================================================================
# EXCEPTIONS
# ============================================================================

class UnknownLabelError(ValueError):
    """Raised when a persisted enum label (goal kind, tag) is not recognized."""
    pass


class SnapshotFormatError(Exception):
    """Raised when a persisted entry or goal record is malformed."""
    pass


# ============================================================================
# HELPERS
# ============================================================================

def clamp(value: float, lower: float, upper: float) -> float:
    # NaN compares false against both bounds
    if math.isnan(value):
        return lower
    return min(max(value, lower), upper)


def clamp_rating(value: float) -> float:
    return clamp(float(value), EngineConfig.RATING_MIN, EngineConfig.RATING_MAX)


def clamp_tone(value: Optional[float]) -> Optional[float]:
    if value is None or math.isnan(float(value)):
        return None
    return clamp(float(value), EngineConfig.TONE_MIN, EngineConfig.TONE_MAX)


def finite_or_none(value: Optional[float]) -> Optional[float]:
    """Non-finite measurements (NaN, inf) count as unavailable."""
    if value is None:
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def parse_timestamp(raw: Any) -> datetime:
    """Accepts ISO 8601 strings (Z or offset) and unix epoch seconds."""
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    if isinstance(raw, str):
        try:
            return datetime.fromisoformat(raw.replace('Z', '+00:00'))
        except ValueError as e:
            raise SnapshotFormatError(f"Invalid timestamp '{raw}': {e}") from e
    raise SnapshotFormatError(f"Unsupported timestamp value: {raw!r}")


def _optional_float(raw: Any) -> Optional[float]:
    if raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise SnapshotFormatError(f"Expected a number, got {raw!r}") from e


# ============================================================================
# ENUMS
# ============================================================================

class Tag(Enum):
    """Fixed tag vocabulary attached to entries."""
    SCHOOL = "school"
    WORK = "work"
    FRIENDS = "friends"
    FAMILY = "family"
    EXERCISE = "exercise"
    SLEEP = "sleep"
    NUTRITION = "nutrition"
    CREATIVITY = "creativity"
    OUTDOORS = "outdoors"
    ANXIOUS = "anxious"
    GRATEFUL = "grateful"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_label(cls, label: str) -> "Tag":
        try:
            return cls(label)
        except ValueError:
            raise UnknownLabelError(f"Unknown tag label: {label!r}") from None


class GoalKind(Enum):
    """Closed set of goal kinds. Every per-kind table below is keyed by member."""
    ENTRIES_TODAY = "entriesToday"
    ENTRIES_THIS_WEEK = "entriesThisWeek"
    DAYS_THIS_WEEK = "daysThisWeek"
    WORDS_TODAY = "wordsToday"
    WORDS_THIS_WEEK = "wordsThisWeek"

    @property
    def display_name(self) -> str:
        return _GOAL_DISPLAY_NAMES[self]

    @property
    def unit_label(self) -> str:
        return _GOAL_UNIT_LABELS[self]

    @property
    def default_target(self) -> float:
        return _GOAL_DEFAULT_TARGETS[self]

    @property
    def target_bounds(self) -> Tuple[float, float]:
        return _GOAL_TARGET_BOUNDS[self]

    @property
    def target_step(self) -> float:
        if self in (GoalKind.WORDS_TODAY, GoalKind.WORDS_THIS_WEEK):
            return 25.0
        return 1.0

    def clamp_target(self, target: float) -> float:
        lower, upper = self.target_bounds
        return clamp(float(target), lower, upper)

    @classmethod
    def from_label(cls, label: str) -> "GoalKind":
        try:
            return cls(label)
        except ValueError:
            raise UnknownLabelError(f"Unknown goal kind: {label!r}") from None


_GOAL_DISPLAY_NAMES: Dict[GoalKind, str] = {
    GoalKind.ENTRIES_TODAY: "Write entries today",
    GoalKind.ENTRIES_THIS_WEEK: "Write entries this week",
    GoalKind.DAYS_THIS_WEEK: "Journal days this week",
    GoalKind.WORDS_TODAY: "Write words today",
    GoalKind.WORDS_THIS_WEEK: "Write words this week",
}

_GOAL_UNIT_LABELS: Dict[GoalKind, str] = {
    GoalKind.ENTRIES_TODAY: "entries",
    GoalKind.ENTRIES_THIS_WEEK: "entries",
    GoalKind.DAYS_THIS_WEEK: "days",
    GoalKind.WORDS_TODAY: "words",
    GoalKind.WORDS_THIS_WEEK: "words",
}

_GOAL_DEFAULT_TARGETS: Dict[GoalKind, float] = {
    GoalKind.ENTRIES_TODAY: 1.0,
    GoalKind.ENTRIES_THIS_WEEK: 5.0,
    GoalKind.DAYS_THIS_WEEK: 4.0,
    GoalKind.WORDS_TODAY: 150.0,
    GoalKind.WORDS_THIS_WEEK: 800.0,
}

_GOAL_TARGET_BOUNDS: Dict[GoalKind, Tuple[float, float]] = {
    GoalKind.ENTRIES_TODAY: (1.0, 10.0),
    GoalKind.ENTRIES_THIS_WEEK: (1.0, 50.0),
    GoalKind.DAYS_THIS_WEEK: (1.0, 7.0),
    GoalKind.WORDS_TODAY: (25.0, 2000.0),
    GoalKind.WORDS_THIS_WEEK: (100.0, 10000.0),
}


class ComponentKind(Enum):
    """Closed set of well-being score factors, in display order."""
    MOOD = "mood"
    LOW_STRESS = "lowStress"
    ENERGY = "energy"
    TONE = "tone"
    REST = "rest"
    ACTIVITY = "activity"

    @property
    def title(self) -> str:
        return _COMPONENT_TITLES[self]


_COMPONENT_TITLES: Dict[ComponentKind, str] = {
    ComponentKind.MOOD: "Mood",
    ComponentKind.LOW_STRESS: "Low stress",
    ComponentKind.ENERGY: "Energy",
    ComponentKind.TONE: "Journal tone",
    ComponentKind.REST: "Rest",
    ComponentKind.ACTIVITY: "Activity",
}


# ============================================================================
# ENTRY MODELS
# ============================================================================

@dataclass(frozen=True)
class DerivedSignals:
    """Tone and keywords computed from an entry's note."""
    tone: Optional[float] = None
    keywords: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'tone', clamp_tone(self.tone))
        object.__setattr__(self, 'keywords', tuple(self.keywords))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'keywords': list(self.keywords)}
        if self.tone is not None:
            data['tone'] = self.tone
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DerivedSignals":
        if not data:
            return cls()
        # Older exports name the tone field sentimentScore
        tone = data.get('tone', data.get('sentimentScore'))
        return cls(tone=_optional_float(tone), keywords=tuple(data.get('keywords') or ()))


@dataclass(frozen=True)
class Context:
    """Optional external signals (rest, activity) resolved by the caller."""
    rest_hours: Optional[float] = None
    activity_count: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'rest_hours', finite_or_none(self.rest_hours))
        object.__setattr__(self, 'activity_count', finite_or_none(self.activity_count))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.rest_hours is not None:
            data['restHours'] = self.rest_hours
        if self.activity_count is not None:
            data['activityCount'] = self.activity_count
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Context"]:
        if not data:
            return None
        return cls(
            rest_hours=_optional_float(data.get('restHours')),
            activity_count=_optional_float(data.get('activityCount')),
        )


@dataclass(frozen=True)
class Entry:
    """A single mood/journal check-in."""
    timestamp: datetime
    mood: float
    energy: float
    stress: float
    tags: Tuple[Tag, ...] = ()
    note: str = ""
    derived: DerivedSignals = field(default_factory=DerivedSignals)
    context: Optional[Context] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        object.__setattr__(self, 'mood', clamp_rating(self.mood))
        object.__setattr__(self, 'energy', clamp_rating(self.energy))
        object.__setattr__(self, 'stress', clamp_rating(self.stress))
        object.__setattr__(self, 'tags', tuple(self.tags))

    def with_derived(self, derived: DerivedSignals) -> "Entry":
        return replace(self, derived=derived)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': self.id,
            'timestamp': self.timestamp.isoformat(),
            'mood': self.mood,
            'energy': self.energy,
            'stress': self.stress,
            'tags': [tag.value for tag in self.tags],
            'note': self.note,
            'derived': self.derived.to_dict(),
        }
        if self.context is not None:
            data['context'] = self.context.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        """
        Builds an entry from its persisted shape.

        Raises:
            SnapshotFormatError: If a required field is missing or not numeric.
            UnknownLabelError: If a tag label is outside the vocabulary.
        """
        try:
            return cls(
                id=str(data['id']),
                timestamp=parse_timestamp(data['timestamp']),
                mood=float(data['mood']),
                energy=float(data['energy']),
                stress=float(data['stress']),
                tags=tuple(Tag.from_label(label) for label in data.get('tags') or ()),
                note=data.get('note') or "",
                derived=DerivedSignals.from_dict(data.get('derived')),
                context=Context.from_dict(data.get('context')),
            )
        except KeyError as e:
            raise SnapshotFormatError(f"Entry record missing field {e}") from e
        except UnknownLabelError:
            raise
        except (TypeError, ValueError) as e:
            raise SnapshotFormatError(f"Malformed entry record: {e}") from e


# ============================================================================
# GOAL MODELS
# ============================================================================

@dataclass(frozen=True)
class Goal:
    """A user-defined journaling goal."""
    title: str
    kind: GoalKind
    target: float
    active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def create(cls, kind: GoalKind, target: Optional[float] = None,
               title: Optional[str] = None, active: bool = True,
               created_at: Optional[datetime] = None) -> "Goal":
        """Blank titles fall back to the kind's display name; target is clamped to the kind's bounds."""
        resolved_title = title if title and title.strip() else kind.display_name
        resolved_target = kind.clamp_target(kind.default_target if target is None else target)
        return cls(
            title=resolved_title,
            kind=kind,
            target=resolved_target,
            active=active,
            created_at=created_at or datetime.now(timezone.utc),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'kind': self.kind.value,
            'target': self.target,
            'isActive': self.active,
            'createdAt': self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Goal":
        try:
            kind = GoalKind.from_label(data['kind'])
            return cls(
                id=str(data['id']),
                title=data.get('title') or kind.display_name,
                kind=kind,
                target=float(data['target']),
                active=bool(data.get('isActive', True)),
                created_at=parse_timestamp(data['createdAt']),
            )
        except KeyError as e:
            raise SnapshotFormatError(f"Goal record missing field {e}") from e
        except UnknownLabelError:
            raise
        except (TypeError, ValueError) as e:
            raise SnapshotFormatError(f"Malformed goal record: {e}") from e


@dataclass(frozen=True)
class GoalProgress:
    """Progress of one goal against an entry snapshot."""
    value: float
    target: float
    label: str

    @property
    def fraction(self) -> float:
        if self.target <= 0:
            return 0.0
        return clamp(self.value / self.target, 0.0, 1.0)

    @property
    def is_complete(self) -> bool:
        return self.target > 0 and self.value >= self.target


# ============================================================================
# SCORE MODELS
# ============================================================================

@dataclass(frozen=True)
class Component:
    """One factor of the well-being score after availability renormalization."""
    kind: ComponentKind
    title: str
    effective_weight: float         # 0 exactly when normalized_value is None
    normalized_value: Optional[float]
    points: float                   # contribution in 0..100 space

    def describe(self) -> str:
        if self.effective_weight == 0:
            return "Not available"
        weight_pct = int(round(self.effective_weight * 100))
        value_pct = int(round((self.normalized_value or 0.0) * 100))
        return f"{weight_pct}% weight · {value_pct}% today"

    def points_text(self) -> str:
        sign = "+" if self.points >= 0 else "−"
        return f"{sign}{abs(self.points):.1f}"


@dataclass(frozen=True)
class ScoreBreakdown:
    total: float
    components: List[Component]
    entry_count: int = 1

    def component(self, kind: ComponentKind) -> Component:
        for component in self.components:
            if component.kind is kind:
                return component
        raise KeyError(kind)
