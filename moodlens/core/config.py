"""
Engine configuration for the journal analytics core.

Tunables (weights, curve breakpoints, bucket hours, word lists) live on
EngineConfig as class attributes. Runtime choices that depend on the host
(timezone, first weekday, signal backend, logging) are read from the
environment by RuntimeSettings.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple

import pytz

logger = logging.getLogger(__name__)


# ============================================================================
# ENGINE TUNABLES
# ============================================================================

class EngineConfig:
    """Centralized configuration for the scoring and aggregation engine."""

    # RATING / TONE DOMAINS
    RATING_MIN: float = 0.0
    RATING_MAX: float = 10.0
    TONE_MIN: float = -1.0
    TONE_MAX: float = 1.0
    SCORE_MAX: float = 100.0
    EPSILON: float = 0.0001

    # BASE WEIGHTS (total = 100% when every factor is available)
    WEIGHT_MOOD: float = 0.35
    WEIGHT_LOW_STRESS: float = 0.15
    WEIGHT_ENERGY: float = 0.15
    WEIGHT_TONE: float = 0.15
    WEIGHT_REST: float = 0.10
    WEIGHT_ACTIVITY: float = 0.10

    # REST CURVE (hours)
    REST_RAMP_START: float = 5.0     # 5h-7h: linear 0 -> 1
    REST_OPTIMAL_MIN: float = 7.0    # 7h-9h: full credit
    REST_OPTIMAL_MAX: float = 9.0
    REST_TAPER_END: float = 11.0     # 9h-11h: linear 1 -> 0.75
    REST_TAPER_FLOOR: float = 0.75
    REST_OUTSIDE_VALUE: float = 0.25
    REST_MAX_HOURS: float = 24.0

    # ACTIVITY CURVE (step count)
    ACTIVITY_SATURATION: float = 10000.0
    ACTIVITY_MAX_COUNT: float = 30000.0
    ACTIVITY_FLOOR: float = 0.10

    # TIME OF DAY BUCKETS (local hour, [start, end))
    MORNING_START: int = 5
    AFTERNOON_START: int = 12
    EVENING_START: int = 17
    NIGHT_START: int = 22

    # TEXT SIGNALS
    KEYWORD_LIMIT: int = 6
    KEYWORD_MIN_LENGTH: int = 3

    POSITIVE_WORDS: List[str] = [
        'good', 'great', 'better', 'calm', 'happy', 'relieved',
        'grateful', 'excited', 'proud'
    ]
    NEGATIVE_WORDS: List[str] = [
        'bad', 'worse', 'sad', 'angry', 'anxious', 'stress',
        'stressed', 'tired', 'overwhelmed'
    ]

    STOPWORDS: FrozenSet[str] = frozenset([
        'a', 'an', 'the', 'and', 'or', 'but', 'to', 'of', 'in', 'on', 'for',
        'with', 'at', 'from', 'i', 'me', 'my', 'we', 'our', 'you', 'your',
        'they', 'their', 'he', 'she', 'it', 'this', 'that', 'is', 'are',
        'was', 'were', 'be', 'been', 'being', 'do', 'did', 'does', 'have',
        'has', 'had', 'as', 'so', 'if', 'then', 'than', 'too', 'very',
        'just', 'not', 'no', 'yes'
    ])
    # Filler verbs that carry no theme in short journal notes
    FILLER_VERBS: FrozenSet[str] = frozenset([
        'feel', 'felt', 'feeling', 'get', 'got', 'make', 'made', 'going',
        'went', 'try', 'trying', 'tried', 'take', 'took', 'can', 'could',
        'would', 'will'
    ])

    # TREND RANGES (days)
    RANGE_OPTIONS: Dict[str, int] = {'7D': 7, '30D': 30, '90D': 90}
    RECENT_KEYWORD_ENTRIES: int = 20
    RECENT_KEYWORD_TOP: int = 10

    @classmethod
    def keyword_stopwords(cls) -> FrozenSet[str]:
        return cls.STOPWORDS | cls.FILLER_VERBS


# ============================================================================
# RUNTIME SETTINGS (ENVIRONMENT)
# ============================================================================

SIGNAL_BACKENDS: Tuple[str, ...] = ('auto', 'lexicon', 'heuristic')

DEFAULT_TIMEZONE = "UTC"
DEFAULT_FIRST_WEEKDAY = 0  # Monday
DEFAULT_SIGNAL_BACKEND = "auto"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIR = "logs"


@dataclass(frozen=True)
class RuntimeSettings:
    """Host-dependent settings resolved once at startup."""
    timezone: str = DEFAULT_TIMEZONE
    first_weekday: int = DEFAULT_FIRST_WEEKDAY
    signal_backend: str = DEFAULT_SIGNAL_BACKEND
    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: str = DEFAULT_LOG_DIR

    @property
    def tzinfo(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)

    @classmethod
    def from_env(cls) -> "RuntimeSettings":
        """
        Builds settings from MOODLENS_* environment variables.

        Invalid values are logged and replaced by their defaults; the engine
        never refuses to start because of a bad environment.
        """
        timezone = os.getenv("MOODLENS_TIMEZONE", DEFAULT_TIMEZONE)
        try:
            pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown timezone '{timezone}', using {DEFAULT_TIMEZONE}")
            timezone = DEFAULT_TIMEZONE

        raw_weekday = os.getenv("MOODLENS_FIRST_WEEKDAY", str(DEFAULT_FIRST_WEEKDAY))
        try:
            first_weekday = int(raw_weekday)
            if not 0 <= first_weekday <= 6:
                raise ValueError(raw_weekday)
        except ValueError:
            logger.warning(f"Invalid first weekday '{raw_weekday}', using Monday")
            first_weekday = DEFAULT_FIRST_WEEKDAY

        backend = os.getenv("MOODLENS_SIGNAL_BACKEND", DEFAULT_SIGNAL_BACKEND).lower()
        if backend not in SIGNAL_BACKENDS:
            logger.warning(f"Unknown signal backend '{backend}', using {DEFAULT_SIGNAL_BACKEND}")
            backend = DEFAULT_SIGNAL_BACKEND

        return cls(
            timezone=timezone,
            first_weekday=first_weekday,
            signal_backend=backend,
            log_level=os.getenv("MOODLENS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            log_dir=os.getenv("MOODLENS_LOG_DIR", DEFAULT_LOG_DIR),
        )
