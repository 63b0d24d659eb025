import pytest
import os
import sys
from unittest.mock import patch
from datetime import datetime
from typing import List, Optional

# Add project root to Python Path so modules can be imported
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from moodlens.core.models import Context, DerivedSignals, Entry
from moodlens.core.signals import HeuristicBackend, SignalBackend, TextSignalExtractor

# Wednesday, week of Monday 2026-10-12
FIXED_NOW = datetime(2026, 10, 14, 15, 0)

# ============================================================================
# 1. GLOBAL ENVIRONMENT
# ============================================================================

@pytest.fixture(autouse=True)
def mock_env_vars(tmp_path):
    """Pins runtime settings for all tests."""
    with patch.dict(os.environ, {
        "MOODLENS_TIMEZONE": "UTC",
        "MOODLENS_FIRST_WEEKDAY": "0",
        "MOODLENS_SIGNAL_BACKEND": "heuristic",
        "MOODLENS_LOG_LEVEL": "INFO",
        "MOODLENS_LOG_DIR": str(tmp_path / "logs"),
    }):
        yield

# ============================================================================
# 2. SIGNAL BACKENDS
# ============================================================================

class FakeBackend(SignalBackend):
    """Deterministic backend returning canned signals."""

    name = "fake"

    def __init__(self, tone: Optional[float] = 0.5, keywords: Optional[List[str]] = None):
        self._tone = tone
        self._keywords = keywords if keywords is not None else ["alpha", "beta"]
        self.calls = 0

    def tone(self, text: str) -> Optional[float]:
        self.calls += 1
        return self._tone

    def keywords(self, text: str) -> List[str]:
        return list(self._keywords)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def make_fake_backend():
    return FakeBackend


@pytest.fixture
def heuristic_extractor():
    return TextSignalExtractor(HeuristicBackend())

# ============================================================================
# 3. ENTRY FACTORIES
# ============================================================================

@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def make_entry():
    """Builds entries with sensible defaults; override any field by keyword."""
    def _make(timestamp: datetime = FIXED_NOW, mood: float = 5.0, energy: float = 5.0,
              stress: float = 5.0, tags=(), note: str = "", tone: Optional[float] = None,
              keywords=(), rest_hours: Optional[float] = None,
              activity_count: Optional[float] = None) -> Entry:
        context = None
        if rest_hours is not None or activity_count is not None:
            context = Context(rest_hours=rest_hours, activity_count=activity_count)
        return Entry(
            timestamp=timestamp, mood=mood, energy=energy, stress=stress,
            tags=tuple(tags), note=note,
            derived=DerivedSignals(tone=tone, keywords=tuple(keywords)),
            context=context,
        )
    return _make
