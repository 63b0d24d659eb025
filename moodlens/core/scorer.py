"""
Composite well-being score (0-100) with per-factor breakdown.

Factors:
- Mood (35% weight)
- Low stress (15% weight)
- Energy (15% weight)
- Journal tone (15% weight, optional)
- Rest (10% weight, optional)
- Activity (10% weight, optional)

Optional factors that are missing are dropped and the remaining base
weights are rescaled to sum to 1, so a missing signal never drags the
score toward 0.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from moodlens.core.config import EngineConfig
from moodlens.core.models import (
    Component, ComponentKind, Context, Entry, ScoreBreakdown,
    clamp, clamp_rating, clamp_tone, finite_or_none
)

logger = logging.getLogger(__name__)


DEFAULT_WEIGHTS: Dict[ComponentKind, float] = {
    ComponentKind.MOOD: EngineConfig.WEIGHT_MOOD,
    ComponentKind.LOW_STRESS: EngineConfig.WEIGHT_LOW_STRESS,
    ComponentKind.ENERGY: EngineConfig.WEIGHT_ENERGY,
    ComponentKind.TONE: EngineConfig.WEIGHT_TONE,
    ComponentKind.REST: EngineConfig.WEIGHT_REST,
    ComponentKind.ACTIVITY: EngineConfig.WEIGHT_ACTIVITY,
}


# ============================================================================
# NORMALIZATION CURVES
# ============================================================================

def normalize_rating(rating: float) -> float:
    return clamp(clamp_rating(rating) / EngineConfig.RATING_MAX, 0.0, 1.0)


def normalize_low_stress(stress: float) -> float:
    return clamp(1.0 - clamp_rating(stress) / EngineConfig.RATING_MAX, 0.0, 1.0)


def normalize_tone(tone: Optional[float]) -> Optional[float]:
    tone = clamp_tone(tone)
    if tone is None:
        return None
    return clamp((tone + 1.0) / 2.0, 0.0, 1.0)


def normalize_rest(hours: Optional[float]) -> Optional[float]:
    """
    Rest hours to [0, 1].

    7-9h gets full credit, 5-7h ramps up from 0, 9-11h tapers down to 0.75,
    anything outside [5, 11] is a flat 0.25.
    """
    hours = finite_or_none(hours)
    if hours is None:
        return None
    cfg = EngineConfig
    h = clamp(hours, 0.0, cfg.REST_MAX_HOURS)

    if cfg.REST_OPTIMAL_MIN <= h <= cfg.REST_OPTIMAL_MAX:
        return 1.0
    if cfg.REST_RAMP_START <= h < cfg.REST_OPTIMAL_MIN:
        return (h - cfg.REST_RAMP_START) / (cfg.REST_OPTIMAL_MIN - cfg.REST_RAMP_START)
    if cfg.REST_OPTIMAL_MAX < h <= cfg.REST_TAPER_END:
        progress = (h - cfg.REST_OPTIMAL_MAX) / (cfg.REST_TAPER_END - cfg.REST_OPTIMAL_MAX)
        return 1.0 - (1.0 - cfg.REST_TAPER_FLOOR) * progress
    return cfg.REST_OUTSIDE_VALUE


def normalize_activity(count: Optional[float]) -> Optional[float]:
    """Eased diminishing returns: 1 - (1 - t)^2 with t saturating at 10k, floored at 0.10."""
    count = finite_or_none(count)
    if count is None:
        return None
    cfg = EngineConfig
    c = clamp(count, 0.0, cfg.ACTIVITY_MAX_COUNT)
    t = min(c / cfg.ACTIVITY_SATURATION, 1.0)
    return max(1.0 - (1.0 - t) ** 2, cfg.ACTIVITY_FLOOR)


Normalizer = Callable[[Entry, Optional[Context]], Optional[float]]

_NORMALIZERS: Dict[ComponentKind, Normalizer] = {
    ComponentKind.MOOD: lambda entry, ctx: normalize_rating(entry.mood),
    ComponentKind.LOW_STRESS: lambda entry, ctx: normalize_low_stress(entry.stress),
    ComponentKind.ENERGY: lambda entry, ctx: normalize_rating(entry.energy),
    ComponentKind.TONE: lambda entry, ctx: normalize_tone(entry.derived.tone),
    ComponentKind.REST: lambda entry, ctx: normalize_rest(ctx.rest_hours if ctx else None),
    ComponentKind.ACTIVITY: lambda entry, ctx: normalize_activity(ctx.activity_count if ctx else None),
}


# ============================================================================
# SCORER
# ============================================================================

class WellBeingScorer:
    """Scores entries against a fixed set of base weights."""

    def __init__(self, weights: Optional[Dict[ComponentKind, float]] = None):
        self.weights = dict(DEFAULT_WEIGHTS)
        if weights:
            self.weights.update(weights)

    def breakdown(self, entry: Entry, context: Optional[Context] = None) -> ScoreBreakdown:
        """
        Scores one entry.

        Args:
            entry: The entry to score. Its ratings are clamped to [0, 10].
            context: External rest/activity signals. Defaults to entry.context.

        Returns:
            ScoreBreakdown whose components follow ComponentKind order.
        """
        ctx = context if context is not None else entry.context
        values = {kind: _NORMALIZERS[kind](entry, ctx) for kind in ComponentKind}

        available_weight_sum = sum(
            self.weights[kind] for kind, value in values.items() if value is not None
        )
        denominator = max(available_weight_sum, EngineConfig.EPSILON)

        components: List[Component] = []
        for kind in ComponentKind:
            value = values[kind]
            weight = 0.0 if value is None else self.weights[kind] / denominator
            points = (value or 0.0) * weight * EngineConfig.SCORE_MAX
            components.append(Component(
                kind=kind,
                title=kind.title,
                effective_weight=weight,
                normalized_value=value,
                points=points,
            ))

        total = clamp(sum(c.points for c in components), 0.0, EngineConfig.SCORE_MAX)
        logger.debug(f"[SCORER] Entry {entry.id}: {total:.1f}")
        return ScoreBreakdown(total=total, components=components)

    def total(self, entry: Entry, context: Optional[Context] = None) -> float:
        return self.breakdown(entry, context).total

    def average_breakdown(self, entries: Sequence[Entry]) -> Optional[ScoreBreakdown]:
        """
        Averages breakdowns over several entries (e.g. all of today's).

        Points and effective weights are averaged over every entry; the
        normalized value is averaged only over entries where it was present.
        Returns None for an empty sequence.
        """
        if not entries:
            return None

        n = float(len(entries))
        points_sum = {kind: 0.0 for kind in ComponentKind}
        weight_sum = {kind: 0.0 for kind in ComponentKind}
        value_sum = {kind: 0.0 for kind in ComponentKind}
        value_count = {kind: 0 for kind in ComponentKind}

        for entry in entries:
            for component in self.breakdown(entry).components:
                points_sum[component.kind] += component.points
                weight_sum[component.kind] += component.effective_weight
                if component.normalized_value is not None:
                    value_sum[component.kind] += component.normalized_value
                    value_count[component.kind] += 1

        components = [
            Component(
                kind=kind,
                title=kind.title,
                effective_weight=weight_sum[kind] / n,
                normalized_value=(value_sum[kind] / value_count[kind]) if value_count[kind] else None,
                points=points_sum[kind] / n,
            )
            for kind in ComponentKind
        ]
        total = clamp(sum(c.points for c in components), 0.0, EngineConfig.SCORE_MAX)
        return ScoreBreakdown(total=total, components=components, entry_count=len(entries))
