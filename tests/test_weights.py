from datetime import datetime

import pytest

from conftest import HK
from trailscore.domain import reasons as R
from trailscore.domain.models import RecommendationRecord, UserAction
from trailscore.scoring.weights import FactorWeights, learn_factor_weights

NOW = datetime(2026, 1, 5, 12, 0, tzinfo=HK)


def _record(action, *reasons):
    return RecommendationRecord(trail_id="t", recommended_at=NOW, user_action=action, reasons=list(reasons))


def test_defaults_without_feedback():
    assert learn_factor_weights(None) == FactorWeights()
    assert learn_factor_weights([]) == FactorWeights()


def test_defaults_below_minimum_feedback():
    feedback = [
        _record(UserAction.PLANNED, R.DIFFICULTY_MATCH),
        _record(UserAction.DISMISSED, R.DIFFICULTY_MATCH),
        # Viewed / unanswered records are not feedback.
        _record(UserAction.VIEWED, R.DIFFICULTY_MATCH),
        _record(None, R.DIFFICULTY_MATCH),
    ]
    assert learn_factor_weights(feedback) == FactorWeights()


def test_weights_follow_acceptance_rate():
    feedback = [
        _record(UserAction.PLANNED, R.DIFFICULTY_MATCH, R.HISTORY_NEW_TRAIL),
        _record(UserAction.COMPLETED, R.DIFFICULTY_MATCH),
        _record(UserAction.DISMISSED, R.DIFFICULTY_MATCH, R.TIME_ENOUGH),
    ]
    weights = learn_factor_weights(feedback)

    assert weights.preference == pytest.approx(0.5 + 2 / 3)
    assert weights.available_time == pytest.approx(0.5)
    assert weights.history == pytest.approx(1.5)
    assert weights.diversity == pytest.approx(1.0)
    # No evidence either way.
    assert weights.weather == 1.0
    assert weights.time_of_day == 1.0


def test_for_factor_reads_named_weight():
    assert FactorWeights(time_of_day=0.7).for_factor("time_of_day") == 0.7
