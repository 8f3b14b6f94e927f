from datetime import datetime

import pytest

from conftest import HK, make_hike, make_trail
from trailscore.config.settings import ScoringSettings
from trailscore.domain import reasons as R
from trailscore.domain.models import (
    Difficulty,
    DistanceRange,
    SceneryType,
    TrailRecommendation,
    UserPreference,
    WeatherSnapshot,
)
from trailscore.recommender.engine import evaluate_trail, recommend
from trailscore.scoring.weights import FactorWeights


def test_empty_catalog_returns_empty_list(now):
    weather = WeatherSnapshot(location="HKO", temperature_c=20, humidity=60, updated_at=now)
    assert recommend([], UserPreference(), weather, now=now, available_time_seconds=3600) == []


def test_matching_preference_scenario():
    now = datetime(2026, 1, 5, 7, 0, tzinfo=HK)
    trail = make_trail(length_km=8, difficulty=Difficulty.EASY)
    pref = UserPreference(preferred_difficulty=Difficulty.EASY, preferred_distance=DistanceRange(min_km=5, max_km=10))

    [rec] = recommend([trail], pref, None, now=now)

    assert rec.reasons == [R.DIFFICULTY_MATCH, R.DISTANCE_MATCH, R.HISTORY_NEW_TRAIL]
    # 0.5 + 0.2 + 0.15 + 0.1 (new trail) + 0.05 (silent fresh bonus)
    assert rec.score == pytest.approx(1.0)
    assert rec.match_percentage == 100


def test_shortfall_penalty_is_silent_and_trail_still_included(now):
    trail = make_trail(minutes=100)
    # Attempted long ago and never finished: no novelty bonus, no completion bonus, no recent repeat.
    history = [make_hike(trail, now=now, days_ago=60, completed=False)]

    [rec] = recommend([trail], now=now, available_time_seconds=0.4 * 100 * 60, history=history)

    assert rec.reasons == []
    # 0.5 - 0.1 (shortfall) + 0.05 (fresh)
    assert rec.score == pytest.approx(0.45)


def test_recent_repeat_penalty_applied_once(now):
    trail = make_trail(length_km=8)
    history = [
        make_hike(trail, now=now, days_ago=5, distance_km=8),
        make_hike(trail, now=now, days_ago=10, distance_km=8, by_name_only=True),
    ]

    evaluation = evaluate_trail(
        trail,
        preference=None,
        weather=None,
        now=now,
        available_time_seconds=None,
        history=history,
        settings=ScoringSettings(),
        weights=FactorWeights(),
    )

    assert evaluation.factors["diversity"].delta == pytest.approx(-0.1)
    assert evaluation.reasons == [R.HISTORY_OFTEN_COMPLETED, R.HISTORY_DISTANCE_SIMILAR]
    # 0.5 + 0.15 + 0.1 - 0.1
    assert evaluation.score == pytest.approx(0.65)


def test_score_exactly_at_threshold_is_excluded(now):
    trail = make_trail(minutes=100)
    history = [make_hike(trail, now=now, days_ago=5, completed=False)]
    kwargs = dict(now=now, available_time_seconds=1800, history=history)

    # 0.5 - 0.1 (shortfall) - 0.1 (recent repeat) == 0.3
    assert recommend([trail], **kwargs) == []

    nudged = ScoringSettings(base_score=0.50001)
    [rec] = recommend([trail], settings=nudged, **kwargs)
    assert rec.score == pytest.approx(0.30001)


def test_score_is_clamped_to_one(now):
    trail = make_trail(name="Sea Mountain Forest Reservoir", length_km=8, minutes=60)
    pref = UserPreference(
        preferred_difficulty=Difficulty.EASY,
        preferred_distance=DistanceRange(min_km=5, max_km=10),
        preferred_scenery=[SceneryType.SEA, SceneryType.MOUNTAIN, SceneryType.FOREST, SceneryType.RESERVOIR],
    )
    weather = WeatherSnapshot(location="HKO", temperature_c=20, humidity=60, updated_at=now)
    [rec] = recommend([trail], pref, weather, now=now, available_time_seconds=7200)
    assert rec.score == 1.0
    assert rec.match_percentage == 100


def test_preferred_distance_is_monotone(now):
    inside = make_trail("inside", name="Alpha", length_km=7)
    outside = make_trail("outside", name="Alpha", length_km=20)
    pref = UserPreference(preferred_distance=DistanceRange(min_km=5, max_km=10))

    ranked = recommend([outside, inside], pref, now=now)

    by_id = {r.id: r.score for r in ranked}
    assert by_id["inside"] >= by_id["outside"]
    assert [r.id for r in ranked] == ["inside", "outside"]


def test_recommend_is_idempotent(now, catalog_trails):
    pref = UserPreference(preferred_scenery=[SceneryType.MOUNTAIN])
    weather = WeatherSnapshot(location="HKO", temperature_c=28, humidity=80, uv_index=9, updated_at=now)
    history = [make_hike(catalog_trails[0], now=now, days_ago=3, distance_km=5)]

    first = recommend(catalog_trails, pref, weather, now=now, available_time_seconds=4 * 3600, history=history)
    second = recommend(catalog_trails, pref, weather, now=now, available_time_seconds=4 * 3600, history=history)

    assert [r.model_dump_json() for r in first] == [r.model_dump_json() for r in second]


def test_equal_scores_keep_catalog_order(now):
    trails = [make_trail(f"t{i}", name=f"Path {i}") for i in range(5)]
    ranked = recommend(trails, now=now)
    assert [r.id for r in ranked] == ["t0", "t1", "t2", "t3", "t4"]


def test_results_sorted_by_score_descending(now, catalog_trails):
    pref = UserPreference(preferred_difficulty=Difficulty.MODERATE)
    ranked = recommend(catalog_trails, pref, now=now, available_time_seconds=3 * 3600)
    scores = [r.score for r in ranked]
    assert scores == sorted(scores, reverse=True)
    # ridge-sunset: 0.5 + 0.2 (difficulty) + 0.05 (tight) + 0.1 + 0.05 = 0.9
    assert [r.id for r in ranked] == ["ridge-sunset", "easy-reservoir", "long-peak"]
    assert ranked[0].score == pytest.approx(0.9)


def test_absent_inputs_skip_their_factors(now):
    evaluation = evaluate_trail(
        make_trail(),
        preference=None,
        weather=None,
        now=now,
        available_time_seconds=None,
        history=[],
        settings=ScoringSettings(),
        weights=FactorWeights(),
    )
    assert evaluation.factors["preference"].details == {"skipped": True}
    assert evaluation.factors["weather"].details == {"skipped": True}
    assert evaluation.factors["available_time"].details == {"skipped": True}
    assert evaluation.recommended


def test_skipped_factor_details_are_not_shared(now):
    kwargs = dict(
        preference=None,
        weather=None,
        now=now,
        available_time_seconds=None,
        history=[],
        settings=ScoringSettings(),
        weights=FactorWeights(),
    )
    first = evaluate_trail(make_trail("a"), **kwargs)
    second = evaluate_trail(make_trail("b"), **kwargs)

    first.factors["weather"].details["note"] = "edited"

    assert first.factors["preference"].details == {"skipped": True}
    assert second.factors["weather"].details == {"skipped": True}


def test_reasons_follow_factor_order(now):
    sunset = datetime(2026, 1, 5, 17, 0, tzinfo=HK)
    trail = make_trail(name="West Ridge", summary="sea views", minutes=60)
    pref = UserPreference(preferred_difficulty=Difficulty.EASY)
    weather = WeatherSnapshot(location="HKO", temperature_c=20, humidity=60, uv_index=10, updated_at=now)

    [rec] = recommend([trail], pref, weather, now=sunset, available_time_seconds=3600)

    assert rec.reasons == [
        R.DIFFICULTY_MATCH,
        R.WEATHER_TEMPERATURE_GOOD,
        R.WEATHER_UV_HIGH,
        R.TIME_SUNSET,
        R.TIME_ENOUGH,
        R.HISTORY_NEW_TRAIL,
    ]


def test_factor_weights_scale_deltas_but_keep_reasons():
    now = datetime(2026, 1, 5, 7, 0, tzinfo=HK)
    trail = make_trail(length_km=8, difficulty=Difficulty.EASY)
    pref = UserPreference(preferred_difficulty=Difficulty.EASY, preferred_distance=DistanceRange(min_km=5, max_km=10))

    [rec] = recommend([trail], pref, now=now, factor_weights=FactorWeights(history=0.0))

    assert R.HISTORY_NEW_TRAIL in rec.reasons
    # 0.5 + 0.35 + 0 * 0.1 + 0.05
    assert rec.score == pytest.approx(0.9)


def test_inputs_are_not_mutated(now, catalog_trails):
    history = [make_hike(catalog_trails[1], now=now, days_ago=2, distance_km=9)]
    before_trails = [t.model_dump() for t in catalog_trails]
    before_history = [h.model_dump() for h in history]

    recommend(catalog_trails, UserPreference(), now=now, history=history)

    assert [t.model_dump() for t in catalog_trails] == before_trails
    assert [h.model_dump() for h in history] == before_history


@pytest.mark.parametrize("score, expected", [(0.125, 12), (0.375, 38), (0.625, 62), (0.874, 87), (1.0, 100)])
def test_match_percentage_rounds_half_to_even(score, expected):
    assert TrailRecommendation(trail=make_trail(), score=score).match_percentage == expected
