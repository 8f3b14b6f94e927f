# src/trailscore/features/preference_match.py
"""
Preference match feature (trail-level).

Rewards trails that match what the user explicitly asked for:
- difficulty (explicit preference, otherwise inferred from fitness level),
- distance and duration ranges (inclusive bounds),
- preferred scenery categories (keyword match on name + summary).

Scenery bonuses accumulate once per matching category unless
`scoring.preference.max_scenery_matches` caps them.
"""

from __future__ import annotations

# Bonus sizes come from config (`scoring.preference`), not constants in this module.
from trailscore.config.settings import PreferenceRules
# Reason identifiers are stable keys; localization happens at the edges.
from trailscore.domain import reasons as R
from trailscore.domain.models import Trail, UserPreference
# Scenery has no structured tags, so we match keywords on the trail text.
from trailscore.features.scenery import matched_scenery, trail_text
from trailscore.scoring.composite import FactorResult


def score_preference_match(trail: Trail, *, preference: UserPreference, rules: PreferenceRules) -> FactorResult:
    delta = 0.0
    reasons: list[str] = []

    # --- Step 1) Difficulty ---
    # An explicit preference replaces the fitness-level inference entirely.
    if preference.preferred_difficulty is not None:
        if trail.difficulty == preference.preferred_difficulty:
            delta += rules.difficulty_match
            reasons.append(R.DIFFICULTY_MATCH)
    elif trail.difficulty in preference.recommended_difficulties:
        delta += rules.fitness_level_match
        reasons.append(R.FITNESS_LEVEL_MATCH)

    # --- Step 2) Distance and duration ranges (both bounds inclusive) ---
    if preference.preferred_distance is not None and preference.preferred_distance.contains(trail.length_km):
        delta += rules.distance_match
        reasons.append(R.DISTANCE_MATCH)

    if preference.preferred_duration is not None and preference.preferred_duration.contains(
        trail.estimated_duration_minutes
    ):
        delta += rules.duration_match
        reasons.append(R.DURATION_MATCH)

    # --- Step 3) Scenery: one bonus (and one reason) per matching category ---
    matched = matched_scenery(trail_text(trail), preference.preferred_scenery)
    counted = matched if rules.max_scenery_matches is None else matched[: rules.max_scenery_matches]
    for _ in counted:
        delta += rules.scenery_match
        reasons.append(R.SCENERY_MATCH)

    # --- Step 4) Details for the explain view ---
    details = {
        "difficulty": trail.difficulty.value,
        "matched_scenery": [s.value for s in matched],
        "scenery_bonuses": len(counted),
    }
    return FactorResult(delta=delta, details=details, reasons=reasons)
