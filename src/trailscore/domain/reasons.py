"""
Reason identifiers emitted by the scoring factors.

The engine only ever emits these identifiers; turning them into display text is
done by `trailscore.i18n.reasons` in the presentation layer.
"""

from __future__ import annotations

from typing import Literal

FactorName = Literal["preference", "weather", "time_of_day", "available_time", "history", "diversity"]

# Fixed evaluation order of the aggregator.
FACTOR_ORDER: tuple[FactorName, ...] = (
    "preference",
    "weather",
    "time_of_day",
    "available_time",
    "history",
    "diversity",
)

DIFFICULTY_MATCH = "difficulty-match"
FITNESS_LEVEL_MATCH = "fitness-level-match"
DISTANCE_MATCH = "distance-match"
DURATION_MATCH = "duration-match"
SCENERY_MATCH = "scenery-match"

WEATHER_TEMPERATURE_GOOD = "weather-temperature-good"
WEATHER_HOT_SHADE = "weather-hot-shade"
WEATHER_UV_HIGH = "weather-uv-high"

TIME_SUNRISE = "time-sunrise"
TIME_SUNSET = "time-sunset"

TIME_ENOUGH = "time-enough"
TIME_TIGHT = "time-tight"

HISTORY_NEW_TRAIL = "history-new-trail"
HISTORY_OFTEN_COMPLETED = "history-often-completed"
HISTORY_DISTANCE_SIMILAR = "history-distance-similar"

# Diversity bonuses/penalties are silent, so that factor owns no identifiers.
FACTOR_REASONS: dict[FactorName, frozenset[str]] = {
    "preference": frozenset(
        {DIFFICULTY_MATCH, FITNESS_LEVEL_MATCH, DISTANCE_MATCH, DURATION_MATCH, SCENERY_MATCH}
    ),
    "weather": frozenset({WEATHER_TEMPERATURE_GOOD, WEATHER_HOT_SHADE, WEATHER_UV_HIGH}),
    "time_of_day": frozenset({TIME_SUNRISE, TIME_SUNSET}),
    "available_time": frozenset({TIME_ENOUGH, TIME_TIGHT}),
    "history": frozenset({HISTORY_NEW_TRAIL, HISTORY_OFTEN_COMPLETED, HISTORY_DISTANCE_SIMILAR}),
    "diversity": frozenset(),
}

ALL_REASONS: tuple[str, ...] = (
    DIFFICULTY_MATCH,
    FITNESS_LEVEL_MATCH,
    DISTANCE_MATCH,
    DURATION_MATCH,
    SCENERY_MATCH,
    WEATHER_TEMPERATURE_GOOD,
    WEATHER_HOT_SHADE,
    WEATHER_UV_HIGH,
    TIME_SUNRISE,
    TIME_SUNSET,
    TIME_ENOUGH,
    TIME_TIGHT,
    HISTORY_NEW_TRAIL,
    HISTORY_OFTEN_COMPLETED,
    HISTORY_DISTANCE_SIMILAR,
)
