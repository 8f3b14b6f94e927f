"""
Recommendation feedback log.

Each shown recommendation becomes a `RecommendationRecord`; when the user later
plans, completes or dismisses the trail, the matching record gets that action.
`trailscore.scoring.weights.learn_factor_weights` reads the log back.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Sequence

from trailscore.catalog.loader import load_feedback, save_feedback
from trailscore.core.time import align_tz
from trailscore.domain.models import RecommendationRecord, TrailRecommendation, UserAction

logger = logging.getLogger(__name__)

# Serializes load-modify-save of the log (API routes run in a threadpool).
_log_lock = threading.Lock()


def record_recommendations(
    path: str | Path,
    recommendations: Sequence[TrailRecommendation],
    now: datetime,
    limit: int = 10,
) -> list[RecommendationRecord]:
    """Append the top `limit` recommendations to the log; returns the new records."""
    new_records = [
        RecommendationRecord(
            trail_id=rec.trail.id,
            recommended_at=now,
            recommendation_score=rec.score,
            reasons=list(rec.reasons),
        )
        for rec in recommendations[: max(limit, 0)]
    ]
    if not new_records:
        return []
    with _log_lock:
        records = load_feedback(path)
        records.extend(new_records)
        save_feedback(path, records)
    logger.info("Recorded %d recommendations to %s", len(new_records), path)
    return new_records


def record_user_action(
    path: str | Path,
    trail_id: str,
    action: UserAction,
    now: datetime,
    window_seconds: int = 3600,
) -> RecommendationRecord | None:
    """Attach `action` to the latest record for `trail_id` shown within the window.

    Returns the updated record, or None when no recent recommendation matches.
    """
    cutoff = now - timedelta(seconds=window_seconds)
    with _log_lock:
        records = load_feedback(path)

        latest_index: int | None = None
        for i, record in enumerate(records):
            if record.trail_id != trail_id:
                continue
            if align_tz(record.recommended_at, cutoff) < cutoff:
                continue
            if latest_index is None or align_tz(record.recommended_at, now) >= align_tz(
                records[latest_index].recommended_at, now
            ):
                latest_index = i

        if latest_index is None:
            logger.info("No recent recommendation for trail %s; action %s not recorded", trail_id, action.value)
            return None

        updated = records[latest_index].model_copy(update={"user_action": action})
        records[latest_index] = updated
        save_feedback(path, records)
    return updated
