"""
Factor weights learned from recommendation feedback.

Every recommendation shown to the user is logged with its reason identifiers; the
user may later plan/complete it (accepted) or dismiss it (rejected). A factor whose
reasons show up mostly on accepted recommendations gets a heavier weight, one
whose reasons show up mostly on dismissed ones gets a lighter weight:

    weight = 0.5 + acceptance_rate        (range 0.5 .. 1.5)

Diversity has no reasons of its own, so its weight follows how often accepted
recommendations were trails the user had never tried (`history-new-trail`).

With fewer than `MIN_FEEDBACK` accepted+rejected records every weight stays 1.0,
which reproduces the unweighted scoring exactly.
"""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, Field

from trailscore.domain import reasons as R
from trailscore.domain.models import RecommendationRecord, UserAction

MIN_FEEDBACK = 3
ACCEPTED_ACTIONS = frozenset({UserAction.PLANNED, UserAction.COMPLETED})
REJECTED_ACTIONS = frozenset({UserAction.DISMISSED})


class FactorWeights(BaseModel):
    """Multiplier applied to each factor's delta before summing."""

    preference: float = Field(1.0, ge=0)
    weather: float = Field(1.0, ge=0)
    time_of_day: float = Field(1.0, ge=0)
    available_time: float = Field(1.0, ge=0)
    history: float = Field(1.0, ge=0)
    diversity: float = Field(1.0, ge=0)

    def for_factor(self, name: R.FactorName) -> float:
        return float(getattr(self, name))


def _count_reasons(records: Sequence[RecommendationRecord], reason_ids: frozenset[str]) -> int:
    return sum(1 for record in records for reason in record.reasons if reason in reason_ids)


def learn_factor_weights(feedback: Sequence[RecommendationRecord] | None) -> FactorWeights:
    """Derive per-factor weights from accepted vs dismissed recommendations."""
    if not feedback:
        return FactorWeights()

    accepted = [r for r in feedback if r.user_action in ACCEPTED_ACTIONS]
    rejected = [r for r in feedback if r.user_action in REJECTED_ACTIONS]
    if len(accepted) + len(rejected) < MIN_FEEDBACK:
        return FactorWeights()

    learned: dict[str, float] = {}
    for name in R.FACTOR_ORDER:
        reason_ids = R.FACTOR_REASONS[name]
        if not reason_ids:
            continue
        in_accepted = _count_reasons(accepted, reason_ids)
        in_rejected = _count_reasons(rejected, reason_ids)
        total = in_accepted + in_rejected
        if total > 0:
            learned[name] = 0.5 + in_accepted / total

    if accepted:
        new_trail_hits = sum(1 for r in accepted if R.HISTORY_NEW_TRAIL in r.reasons)
        learned["diversity"] = 0.5 + new_trail_hits / len(accepted)

    return FactorWeights(**learned)
