# src/trailscore/features/available_time.py
"""Available-time feasibility: can the user finish the trail in the time they have?"""

from __future__ import annotations

# `tight_ratio` and the bonus/penalty sizes live in `scoring.available_time`.
from trailscore.config.settings import AvailableTimeRules
from trailscore.domain import reasons as R
from trailscore.domain.models import Trail
from trailscore.scoring.composite import FactorResult


def trail_duration_seconds(trail: Trail) -> float:
    return float(trail.estimated_duration_minutes) * 60.0


def score_available_time(
    trail: Trail, *, available_time_seconds: float, rules: AvailableTimeRules
) -> FactorResult:
    duration = trail_duration_seconds(trail)
    available = float(available_time_seconds)
    details = {"available_seconds": available, "trail_seconds": duration}

    # --- Step 1) Enough time ---
    if available >= duration:
        return FactorResult(delta=rules.enough_bonus, details=details, reasons=[R.TIME_ENOUGH])
    # --- Step 2) Tight but feasible ---
    if available >= rules.tight_ratio * duration:
        return FactorResult(delta=rules.tight_bonus, details=details, reasons=[R.TIME_TIGHT])
    # --- Step 3) Shortfall: penalty with no reason text ---
    return FactorResult(delta=-rules.shortfall_penalty, details=details, reasons=[])
