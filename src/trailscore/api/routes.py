"""
API routes.

Endpoints:
- POST `/api/recommendations`: main recommender entrypoint (`?record=true` logs the results).
- GET  `/api/trails`: the trail catalog.
- POST `/api/feedback`: record what the user did with a recommended trail.
- GET  `/api/settings`: public settings for UI defaults.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, HTTPException

from trailscore.catalog.feedback import record_recommendations, record_user_action
from trailscore.catalog.loader import load_trails
from trailscore.config.settings import get_settings
from trailscore.core.time import now_in
from trailscore.domain.models import (
    FeedbackRequest,
    RecommendationRecord,
    RecommendationRequest,
    RecommendationResult,
    Trail,
)
from trailscore.ingestion.weather_client import WeatherClient
from trailscore.recommender.service import build_cache, run_recommendations

router = APIRouter()


@lru_cache
def _clients() -> WeatherClient:
    settings = get_settings()
    return WeatherClient(settings, build_cache(settings))


@router.post("/api/recommendations", response_model=RecommendationResult)
def post_recommendations(request: RecommendationRequest, record: bool = False) -> RecommendationResult:
    """Run the recommender with a validated request and return Top-N results."""
    settings = get_settings()
    try:
        result = run_recommendations(request, settings=settings, weather_client=_clients())
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e

    if record:
        record_recommendations(
            settings.catalog.feedback_path,
            [item.recommendation for item in result.results],
            result.now,
            limit=settings.catalog.feedback_record_limit,
        )
    return result


@router.get("/api/trails", response_model=list[Trail])
def get_trails() -> list[Trail]:
    """Return the configured trail catalog in catalog order."""
    return load_trails(get_settings().catalog.trails_path)


@router.post("/api/feedback", response_model=RecommendationRecord)
def post_feedback(payload: FeedbackRequest) -> RecommendationRecord:
    """Attach a user action to the latest recent recommendation of a trail."""
    settings = get_settings()
    updated = record_user_action(
        settings.catalog.feedback_path,
        payload.trail_id,
        payload.action,
        now_in(settings.app.timezone),
    )
    if updated is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "RECOMMENDATION_NOT_FOUND", "message": "No recent recommendation for this trail."},
        )
    return updated


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for UI defaults (no file paths or endpoints)."""
    data = get_settings().model_dump(mode="json")
    return {
        "app": {
            "timezone": data["app"]["timezone"],
            "default_language": data["app"]["default_language"],
        },
        "scoring": data["scoring"],
    }
