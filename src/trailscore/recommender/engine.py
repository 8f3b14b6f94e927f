from __future__ import annotations

# The recommendation engine: a pure reduction over in-memory inputs.
#
# For each trail: base score, six factors in a fixed order, clamp, strict threshold.
# Then a stable sort by score (ties keep catalog order).
#
# No I/O, no clock reads, no shared state: `now` is supplied by the caller, so two
# calls with the same inputs return identical output and concurrent calls are safe.
# Reasons come back as identifiers; localization is the presentation layer's job.

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from trailscore.config.settings import ScoringSettings
from trailscore.domain.models import (
    HikeRecord,
    Trail,
    TrailRecommendation,
    UserPreference,
    WeatherSnapshot,
)
from trailscore.domain.reasons import FACTOR_ORDER, FactorName
from trailscore.features.available_time import score_available_time
from trailscore.features.diversity import score_diversity
from trailscore.features.history import score_history
from trailscore.features.preference_match import score_preference_match
from trailscore.features.time_of_day import score_time_of_day
from trailscore.features.weather import score_weather
from trailscore.scoring.composite import FactorResult, combine, passes_threshold, skipped
from trailscore.scoring.weights import FactorWeights

_DEFAULT_SETTINGS = ScoringSettings()
_DEFAULT_WEIGHTS = FactorWeights()


@dataclass(frozen=True)
class TrailEvaluation:
    """Full per-trail breakdown (kept or not), for debugging and explain views."""

    trail: Trail
    score: float
    factors: dict[FactorName, FactorResult]
    reasons: list[str]
    recommended: bool


def evaluate_trail(
    trail: Trail,
    *,
    preference: UserPreference | None,
    weather: WeatherSnapshot | None,
    now: datetime,
    available_time_seconds: float | None,
    history: Sequence[HikeRecord],
    settings: ScoringSettings,
    weights: FactorWeights,
) -> TrailEvaluation:
    """Score one trail against every factor (absent optional inputs skip their factor)."""
    factors: dict[FactorName, FactorResult] = {
        "preference": (
            score_preference_match(trail, preference=preference, rules=settings.preference)
            if preference is not None
            else skipped()
        ),
        "weather": (
            score_weather(trail, weather=weather, rules=settings.weather) if weather is not None else skipped()
        ),
        "time_of_day": score_time_of_day(trail, now=now, rules=settings.time_of_day),
        "available_time": (
            score_available_time(
                trail, available_time_seconds=available_time_seconds, rules=settings.available_time
            )
            if available_time_seconds is not None
            else skipped()
        ),
        "history": score_history(trail, history=history, rules=settings.history),
        "diversity": score_diversity(trail, history=history, now=now, rules=settings.diversity),
    }

    reasons = [reason for name in FACTOR_ORDER for reason in factors[name].reasons]
    score = combine(
        settings.base_score,
        (factors[name].delta * weights.for_factor(name) for name in FACTOR_ORDER),
    )
    return TrailEvaluation(
        trail=trail,
        score=score,
        factors=factors,
        reasons=reasons,
        recommended=passes_threshold(score, settings.min_score),
    )


def recommend(
    trails: Sequence[Trail],
    preference: UserPreference | None = None,
    weather: WeatherSnapshot | None = None,
    *,
    now: datetime,
    available_time_seconds: float | None = None,
    history: Sequence[HikeRecord] = (),
    settings: ScoringSettings | None = None,
    factor_weights: FactorWeights | None = None,
) -> list[TrailRecommendation]:
    """Rank `trails` for the given context; only scores above `min_score` are returned.

    Callers must pass snapshots (the inputs are read, never mutated).
    """
    settings = settings or _DEFAULT_SETTINGS
    weights = factor_weights or _DEFAULT_WEIGHTS

    recommendations: list[TrailRecommendation] = []
    for trail in trails:
        evaluation = evaluate_trail(
            trail,
            preference=preference,
            weather=weather,
            now=now,
            available_time_seconds=available_time_seconds,
            history=history,
            settings=settings,
            weights=weights,
        )
        if evaluation.recommended:
            recommendations.append(
                TrailRecommendation(trail=trail, score=evaluation.score, reasons=evaluation.reasons)
            )

    # list.sort is stable: equal scores keep catalog order.
    recommendations.sort(key=lambda r: r.score, reverse=True)
    return recommendations
