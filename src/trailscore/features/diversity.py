# src/trailscore/features/diversity.py
"""
Diversity feature: nudge the user away from repeating the exact same trail.

Both the bonus and the penalty are silent (no reason identifiers). The penalty is
applied once however many recent hikes match.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from trailscore.config.settings import DiversityRules
# Logged timestamps may be naive; compare them in the zone of `now`.
from trailscore.core.time import align_tz
from trailscore.domain.models import HikeRecord, Trail
from trailscore.scoring.composite import FactorResult


def recent_hikes(
    trail: Trail, *, history: Sequence[HikeRecord], now: datetime, days: int
) -> list[HikeRecord]:
    """Hikes of this exact trail id that started within `days` before `now`."""
    cutoff = now - timedelta(days=days)
    return [
        r
        for r in history
        if r.trail_id == trail.id and align_tz(r.start_time, cutoff) > cutoff
    ]


def score_diversity(
    trail: Trail, *, history: Sequence[HikeRecord], now: datetime, rules: DiversityRules
) -> FactorResult:
    # --- Step 1) Count recent hikes of this exact trail (id match only) ---
    recent = recent_hikes(trail, history=history, now=now, days=rules.recent_days)
    details = {"recent_count": len(recent), "recent_days": rules.recent_days}

    # --- Step 2) One penalty for a repeat, otherwise the fresh bonus ---
    if recent:
        return FactorResult(delta=-rules.repeat_penalty, details=details)
    return FactorResult(delta=rules.fresh_bonus, details=details)
