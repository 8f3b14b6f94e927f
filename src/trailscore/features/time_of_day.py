# src/trailscore/features/time_of_day.py
"""
Time-of-day feature.

Early morning favors sunrise / east-facing trails, late afternoon favors sunset /
west-facing ones. The hour is read from the caller-supplied `now` exactly as given
(its own timezone, or wall clock when naive).
"""

from __future__ import annotations

from datetime import datetime

# Hour windows are inclusive ranges from `scoring.time_of_day`.
from trailscore.config.settings import TimeOfDayRules
from trailscore.domain import reasons as R
from trailscore.domain.models import Trail
from trailscore.features.scenery import SUNRISE_KEYWORDS, SUNSET_KEYWORDS, contains_any, trail_text
from trailscore.scoring.composite import FactorResult


def score_time_of_day(trail: Trail, *, now: datetime, rules: TimeOfDayRules) -> FactorResult:
    # --- Step 1) Pick the window for the current hour ---
    hour = now.hour
    details: dict = {"hour": hour, "window": None}

    # --- Step 2) Bonus only when the trail text fits that window ---
    if rules.sunrise_hours.contains(hour):
        details["window"] = "sunrise"
        if contains_any(trail_text(trail), SUNRISE_KEYWORDS):
            return FactorResult(delta=rules.bonus, details=details, reasons=[R.TIME_SUNRISE])
    elif rules.sunset_hours.contains(hour):
        details["window"] = "sunset"
        if contains_any(trail_text(trail), SUNSET_KEYWORDS):
            return FactorResult(delta=rules.bonus, details=details, reasons=[R.TIME_SUNSET])

    return FactorResult(delta=0.0, details=details, reasons=[])
