import pytest
from datetime import datetime, timezone

from moodlens.core.models import (
    ComponentKind, Context, DerivedSignals, Entry, Goal, GoalKind, SnapshotFormatError,
    Tag, UnknownLabelError, _GOAL_DEFAULT_TARGETS, _GOAL_DISPLAY_NAMES,
    _GOAL_TARGET_BOUNDS, _GOAL_UNIT_LABELS, _COMPONENT_TITLES
)


class TestEntryModel:
    """Test suite for entry invariants and persisted shape."""

    def test_ratings_clamped_on_construction(self):
        entry = Entry(timestamp=datetime(2026, 10, 14), mood=12, energy=-1, stress=10.5)
        assert (entry.mood, entry.energy, entry.stress) == (10.0, 0.0, 10.0)

    def test_tone_clamped(self):
        assert DerivedSignals(tone=-4).tone == -1.0
        assert DerivedSignals(tone=None).tone is None

    def test_entry_from_persisted_shape(self):
        record = {
            'id': 'abc',
            'timestamp': '2026-10-14T21:10:00Z',
            'mood': 7.5, 'energy': 5.5, 'stress': 3,
            'tags': ['friends', 'grateful'],
            'note': 'Talked with a friend.',
            'derived': {'tone': 0.4, 'keywords': ['friend']},
            'context': {'restHours': 7.5},
        }
        entry = Entry.from_dict(record)

        assert entry.timestamp == datetime(2026, 10, 14, 21, 10, tzinfo=timezone.utc)
        assert entry.tags == (Tag.FRIENDS, Tag.GRATEFUL)
        assert entry.derived.keywords == ('friend',)
        assert entry.context == Context(rest_hours=7.5, activity_count=None)
        assert Entry.from_dict(entry.to_dict()) == entry

    def test_optional_sections_omitted(self):
        data = Entry(id='x', timestamp=datetime(2026, 10, 14), mood=5, energy=5, stress=5).to_dict()
        assert 'context' not in data
        assert data['derived'] == {'keywords': []}

    def test_legacy_sentiment_key(self):
        derived = DerivedSignals.from_dict({'sentimentScore': -0.25, 'keywords': []})
        assert derived.tone == -0.25

    def test_epoch_timestamp(self):
        entry = Entry.from_dict({'id': 'e', 'timestamp': 0, 'mood': 1, 'energy': 1, 'stress': 1})
        assert entry.timestamp == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_missing_field_is_format_error(self):
        with pytest.raises(SnapshotFormatError):
            Entry.from_dict({'id': 'e', 'timestamp': '2026-10-14T10:00:00', 'mood': 5})

    def test_bad_number_is_format_error(self):
        with pytest.raises(SnapshotFormatError):
            Entry.from_dict({'id': 'e', 'timestamp': '2026-10-14T10:00:00',
                             'mood': 'happy', 'energy': 5, 'stress': 5})

    def test_with_derived_returns_copy(self):
        entry = Entry(id='x', timestamp=datetime(2026, 10, 14), mood=5, energy=5, stress=5)
        updated = entry.with_derived(DerivedSignals(tone=0.2, keywords=('walk',)))

        assert updated.derived.keywords == ('walk',)
        assert updated.id == entry.id
        assert entry.derived == DerivedSignals()

    def test_unknown_tag_rejected(self):
        with pytest.raises(UnknownLabelError):
            Entry.from_dict({'id': 'e', 'timestamp': '2026-10-14T10:00:00',
                             'mood': 5, 'energy': 5, 'stress': 5, 'tags': ['hobbies']})


class TestGoalModel:
    """Test suite for goal kinds and persisted shape."""

    def test_create_defaults(self):
        goal = Goal.create(GoalKind.WORDS_TODAY)
        assert goal.title == "Write words today"
        assert goal.target == 150
        assert goal.active is True

    def test_create_clamps_target_and_keeps_title(self):
        goal = Goal.create(GoalKind.DAYS_THIS_WEEK, target=12, title="Show up")
        assert goal.target == 7
        assert goal.title == "Show up"

    def test_blank_title_falls_back(self):
        assert Goal.create(GoalKind.ENTRIES_TODAY, title="   ").title == "Write entries today"

    def test_goal_round_trip(self):
        goal = Goal.create(GoalKind.ENTRIES_THIS_WEEK, target=5,
                           created_at=datetime(2026, 10, 1, tzinfo=timezone.utc))
        data = goal.to_dict()
        assert data['kind'] == 'entriesThisWeek'
        assert Goal.from_dict(data) == goal

    def test_unknown_kind_rejected(self):
        with pytest.raises(UnknownLabelError):
            Goal.from_dict({'id': 'g', 'title': 't', 'kind': 'stepsToday',
                            'target': 1, 'createdAt': '2026-10-01T00:00:00'})

    def test_target_step(self):
        assert GoalKind.WORDS_THIS_WEEK.target_step == 25
        assert GoalKind.ENTRIES_TODAY.target_step == 1

    @pytest.mark.parametrize("table", [
        _GOAL_DISPLAY_NAMES, _GOAL_UNIT_LABELS, _GOAL_DEFAULT_TARGETS, _GOAL_TARGET_BOUNDS
    ])
    def test_goal_tables_cover_every_kind(self, table):
        assert set(table) == set(GoalKind)

    def test_default_targets_within_bounds(self):
        for kind in GoalKind:
            lower, upper = kind.target_bounds
            assert lower <= kind.default_target <= upper

    def test_component_titles_cover_every_kind(self):
        assert set(_COMPONENT_TITLES) == set(ComponentKind)
