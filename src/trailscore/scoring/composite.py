"""
Shared scoring utilities.

Small helpers used by the factor functions and the aggregator:
- `FactorResult`: one factor's signed delta plus its explainability payload
- `clamp01`: keep the final score within 0..1
- `combine`: base score + weighted deltas -> clamped score
- `passes_threshold`: the strict `> min_score` inclusion rule
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

# Deltas are sums of decimal literals (0.1, 0.15, ...); rounding the sum to this many
# places keeps float drift from pushing a score across the inclusion threshold.
SCORE_PRECISION = 9


def clamp01(x: float) -> float:
    """Clamp a number into the [0.0, 1.0] range."""
    return max(0.0, min(1.0, float(x)))


@dataclass(frozen=True)
class FactorResult:
    """A signed score delta plus the reason identifiers that explain it."""

    delta: float = 0.0
    details: dict[str, Any] = field(default_factory=dict)
    reasons: list[str] = field(default_factory=list)


def skipped() -> FactorResult:
    """Result for a factor whose optional input is absent (fresh details per call)."""
    return FactorResult(details={"skipped": True})


def combine(base_score: float, weighted_deltas: Iterable[float]) -> float:
    """Sum deltas onto the base score, then clamp; clamping is the only normalization."""
    raw = round(float(base_score) + sum(weighted_deltas), SCORE_PRECISION)
    return clamp01(raw)


def passes_threshold(score: float, min_score: float) -> bool:
    """Scores equal to `min_score` are excluded."""
    return round(score, SCORE_PRECISION) > min_score
