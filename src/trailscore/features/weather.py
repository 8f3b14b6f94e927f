# src/trailscore/features/weather.py
"""
Weather suitability feature (trail-level).

Converts a weather snapshot into a small additive delta:
- comfortable temperature window -> bonus,
- hot weather -> smaller bonus only for shaded / near-water trails,
- high UV -> informational reason, no score change.

Precipitation is not scored; the observatory "current weather" payload has no
rain probability to base it on.
"""

from __future__ import annotations

# Comfort window, bonuses and the UV threshold are config-driven (`scoring.weather`).
from trailscore.config.settings import WeatherRules
from trailscore.domain import reasons as R
# WeatherSnapshot is the ingestion output; this module never calls the network.
from trailscore.domain.models import Trail, WeatherSnapshot
from trailscore.features.scenery import SHADE_OR_WATER_KEYWORDS, contains_any, trail_text
from trailscore.scoring.composite import FactorResult


def score_weather(trail: Trail, *, weather: WeatherSnapshot, rules: WeatherRules) -> FactorResult:
    delta = 0.0
    reasons: list[str] = []

    # --- Step 1) Temperature comfort ---
    temp = float(weather.temperature_c)
    comfort = rules.comfort_temperature_c
    if comfort.min <= temp <= comfort.max:
        delta += rules.comfort_bonus
        reasons.append(R.WEATHER_TEMPERATURE_GOOD)
    elif temp > comfort.max and contains_any(trail_text(trail), SHADE_OR_WATER_KEYWORDS):
        # Hot: only trails with shade or water nearby get the smaller bonus. Cold is neutral.
        delta += rules.hot_shade_bonus
        reasons.append(R.WEATHER_HOT_SHADE)

    # --- Step 2) UV warning (reason only) ---
    if weather.uv_index >= rules.high_uv_index:
        reasons.append(R.WEATHER_UV_HIGH)

    # --- Step 3) Details ---
    details = {
        "temperature_c": temp,
        "uv_index": weather.uv_index,
        "location": weather.location,
    }
    return FactorResult(delta=delta, details=details, reasons=reasons)
