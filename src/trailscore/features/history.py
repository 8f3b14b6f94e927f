# src/trailscore/features/history.py
"""
History affinity feature.

Learns from the user's own hike log:
- trails never attempted get a novelty bonus,
- trails (or similarly named trails) the user usually finishes get a bonus,
- trails whose length is close to the user's typical completed distance get a bonus.

"Similar" means the same trail id, or a logged trail name containing this trail's
name (case-insensitive); names survive catalog re-imports where ids may not.
"""

from __future__ import annotations

from typing import Sequence

# Thresholds and bonuses come from `scoring.history`.
from trailscore.config.settings import HistoryRules
from trailscore.domain import reasons as R
# HikeRecord may carry only a name (manual log entries) or only an id.
from trailscore.domain.models import HikeRecord, Trail
from trailscore.scoring.composite import FactorResult


def is_similar_record(record: HikeRecord, trail: Trail) -> bool:
    if record.trail_id is not None and record.trail_id == trail.id:
        return True
    if record.trail_name is not None:
        # An empty trail name is a substring of every recorded name.
        return trail.name.lower() in record.trail_name.lower()
    return False


def mean_completed_distance_km(history: Sequence[HikeRecord]) -> float | None:
    """Mean distance over ALL completed hikes, or None when nothing was completed."""
    completed = [r.distance_km for r in history if r.is_completed]
    if not completed:
        return None
    return sum(completed) / len(completed)


def score_history(trail: Trail, *, history: Sequence[HikeRecord], rules: HistoryRules) -> FactorResult:
    delta = 0.0
    reasons: list[str] = []

    # --- Step 1) Novelty or completion affinity over similar records ---
    similar = [r for r in history if is_similar_record(r, trail)]
    completion_rate: float | None = None
    if not similar:
        delta += rules.new_trail_bonus
        reasons.append(R.HISTORY_NEW_TRAIL)
    else:
        completion_rate = sum(1 for r in similar if r.is_completed) / len(similar)
        # Strictly greater: exactly at the threshold earns nothing.
        if completion_rate > rules.completion_rate_threshold:
            delta += rules.often_completed_bonus
            reasons.append(R.HISTORY_OFTEN_COMPLETED)

    # --- Step 2) Distance similarity against ALL completed hikes ---
    # A zero mean (only zero-distance completions) carries no signal.
    mean_km = mean_completed_distance_km(history)
    relative_diff: float | None = None
    if mean_km is not None and mean_km > 0:
        relative_diff = abs(trail.length_km - mean_km) / mean_km
        if relative_diff < rules.distance_tolerance:
            delta += rules.distance_similar_bonus
            reasons.append(R.HISTORY_DISTANCE_SIMILAR)

    # --- Step 3) Details ---
    details = {
        "similar_count": len(similar),
        "completion_rate": completion_rate,
        "mean_completed_km": mean_km,
        "relative_distance_diff": relative_diff,
    }
    return FactorResult(delta=delta, details=details, reasons=reasons)
