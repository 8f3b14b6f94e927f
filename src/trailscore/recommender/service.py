from __future__ import annotations

# This module is the app-layer orchestrator around the pure engine.
# It wires together:
# - request input (RecommendationRequest)
# - data loading (trail catalog, hike history, feedback log)
# - ingestion (observatory weather, optional and fail-open)
# - learned factor weights + the engine (`recommender.engine.recommend`)
# - top-N truncation + reason localization (RecommendationResult)
#
# The engine itself never reads files, the network or the clock; everything it needs
# is resolved here and passed in.

import logging
import time
from typing import Any, Sequence

from trailscore.catalog.loader import load_feedback, load_history, load_trails
from trailscore.config.overrides import apply_settings_overrides
from trailscore.config.settings import Settings, get_settings
from trailscore.core.cache import FileCache
from trailscore.core.env import resolve_project_path
from trailscore.core.time import ensure_tz, now_in
from trailscore.domain.models import (
    HikeRecord,
    RecommendationItem,
    RecommendationRecord,
    RecommendationRequest,
    RecommendationResult,
    Trail,
    WeatherSnapshot,
)
from trailscore.i18n.reasons import load_string_catalog, localize_reasons
from trailscore.ingestion.weather_client import WeatherClient, WeatherUnavailableError
from trailscore.recommender.engine import recommend
from trailscore.scoring.weights import FactorWeights, learn_factor_weights

logger = logging.getLogger(__name__)


def build_cache(settings: Settings) -> FileCache:
    return FileCache(
        resolve_project_path(settings.cache.dir),
        enabled=settings.cache.enabled,
        default_ttl_seconds=settings.cache.default_ttl_seconds,
    )


def _resolve_weather(
    request: RecommendationRequest,
    *,
    settings: Settings,
    language: str,
    weather_client: WeatherClient | None,
    warnings: list[dict[str, Any]],
) -> tuple[WeatherSnapshot | None, str]:
    """Pick the weather snapshot for this run; returns (snapshot, source)."""
    if request.weather is not None:
        return request.weather, "request"
    if not request.use_live_weather:
        return None, "none"

    if weather_client is None:
        weather_client = WeatherClient(settings, build_cache(settings))
    try:
        return weather_client.get_snapshot(language), "live"
    except WeatherUnavailableError as e:
        # Fail open: the weather factor is skipped, every other factor still runs.
        logger.warning("Weather ingestion failed: %s", str(e))
        warnings.append(
            {
                "code": "WEATHER_UNAVAILABLE",
                "message": "Live weather could not be fetched; the weather factor was skipped.",
                "detail": {"error": str(e)},
            }
        )
        return None, "unavailable"


def run_recommendations(
    request: RecommendationRequest,
    *,
    settings: Settings | None = None,
    trails: Sequence[Trail] | None = None,
    history: Sequence[HikeRecord] | None = None,
    feedback: Sequence[RecommendationRecord] | None = None,
    weather_client: WeatherClient | None = None,
) -> RecommendationResult:
    t0 = time.monotonic()
    timings_ms: dict[str, int] = {}
    warnings: list[dict[str, Any]] = []

    # ---- Settings for THIS run (per-request overrides are allowlisted) ----
    settings = settings or get_settings()
    settings = apply_settings_overrides(settings, request.settings_overrides)

    language = request.language or settings.app.default_language
    # Unsupported languages fail before any data is loaded.
    load_string_catalog().require_language(language)

    now = ensure_tz(request.now, settings.app.timezone) if request.now else now_in(settings.app.timezone)
    top_n = int(request.max_results or settings.scoring.top_n_default)

    # ---- Data (injected by tests, otherwise loaded from the configured paths) ----
    if trails is None:
        trails = load_trails(settings.catalog.trails_path)
    if history is None:
        history = load_history(settings.catalog.history_path)
    if feedback is None and request.learn_from_feedback:
        feedback = load_feedback(settings.catalog.feedback_path)
    timings_ms["load_data"] = int((time.monotonic() - t0) * 1000)

    # ---- Weather (request snapshot > live observatory > none) ----
    t_weather = time.monotonic()
    weather, weather_source = _resolve_weather(
        request, settings=settings, language=language, weather_client=weather_client, warnings=warnings
    )
    timings_ms["weather"] = int((time.monotonic() - t_weather) * 1000)

    weights = learn_factor_weights(feedback) if request.learn_from_feedback else FactorWeights()

    # ---- Score + rank ----
    t_score = time.monotonic()
    ranked = recommend(
        trails,
        request.preference,
        weather,
        now=now,
        available_time_seconds=request.available_time_seconds,
        history=history,
        settings=settings.scoring,
        factor_weights=weights,
    )
    timings_ms["score"] = int((time.monotonic() - t_score) * 1000)

    catalog = load_string_catalog()
    results = [
        RecommendationItem(recommendation=rec, reason_texts=localize_reasons(rec.reasons, language, catalog=catalog))
        for rec in ranked[:top_n]
    ]
    if not results:
        warnings.append(
            {
                "code": "NO_RECOMMENDATIONS",
                "message": catalog.lookup("recommendations.adjust.preferences", language),
                "detail": {"candidates_scored": len(trails)},
            }
        )
    timings_ms["total"] = int((time.monotonic() - t0) * 1000)

    meta = {
        "data_sources": {
            "catalog": {"candidates_scored": len(trails), "recommended": len(ranked)},
            "history": {"records": len(history)},
            "feedback": {"records": len(feedback or []), "learned": request.learn_from_feedback},
            "weather": {"source": weather_source, "location": weather.location if weather else None},
        },
        "settings_snapshot": {
            "max_results": top_n,
            "min_score": float(settings.scoring.min_score),
            "base_score": float(settings.scoring.base_score),
            "factor_weights": weights.model_dump(),
            "overrides_enabled": bool(request.settings_overrides),
            "timezone": str(settings.app.timezone),
        },
        "warnings": warnings,
        "timings_ms": timings_ms,
    }

    return RecommendationResult(
        generated_at=now_in(settings.app.timezone),
        now=now,
        language=language,
        results=results,
        meta=meta,
    )
