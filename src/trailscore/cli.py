"""
TrailScore CLI entrypoint.

This CLI is intended for quick local demos and debugging without an HTTP client.
It delegates all recommendation logic to `trailscore.recommender.service.run_recommendations`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from trailscore.catalog.feedback import record_recommendations, record_user_action
from trailscore.catalog.loader import load_trails
from trailscore.config.settings import get_settings
from trailscore.core.logging import configure_logging
from trailscore.core.time import now_in, parse_datetime
from trailscore.domain.models import (
    Difficulty,
    DistanceRange,
    DurationRange,
    FitnessLevel,
    RecommendationRequest,
    SceneryType,
    UserAction,
    UserPreference,
)
from trailscore.i18n.reasons import load_string_catalog
from trailscore.ingestion.weather_client import WeatherClient
from trailscore.recommender.service import build_cache, run_recommendations
from trailscore.scoring.explain import one_line_summary, trail_label


def _parse_range(value: str, flag: str) -> tuple[float, float]:
    """Parse `MIN-MAX` CLI arguments (e.g. `5-10`)."""
    if "-" not in value:
        raise ValueError(f"Invalid {flag} '{value}', expected MIN-MAX")
    lo, hi = value.split("-", 1)
    return float(lo), float(hi)


def _build_preference(args: argparse.Namespace) -> UserPreference | None:
    fields: dict[str, Any] = {}
    if args.difficulty:
        fields["preferred_difficulty"] = Difficulty(args.difficulty)
    if args.fitness:
        fields["fitness_level"] = FitnessLevel(args.fitness)
    if args.distance:
        lo, hi = _parse_range(args.distance, "--distance")
        fields["preferred_distance"] = DistanceRange(min_km=lo, max_km=hi)
    if args.duration:
        lo, hi = _parse_range(args.duration, "--duration")
        fields["preferred_duration"] = DurationRange(min_minutes=int(lo), max_minutes=int(hi))
    if args.scenery:
        fields["preferred_scenery"] = [SceneryType(s) for s in args.scenery]
    return UserPreference(**fields) if fields else None


def _cmd_recommend(args: argparse.Namespace) -> int:
    """Handle the `recommend` subcommand."""
    settings = get_settings()

    request = RecommendationRequest(
        preference=_build_preference(args),
        now=parse_datetime(args.now, settings.app.timezone) if args.now else None,
        available_time_seconds=float(args.available_hours) * 3600 if args.available_hours is not None else None,
        language=args.language,
        max_results=int(args.max_results) if args.max_results is not None else None,
        use_live_weather=bool(args.live_weather),
        learn_from_feedback=not bool(args.no_learning),
    )
    result = run_recommendations(request, settings=settings)

    if args.record:
        record_recommendations(
            settings.catalog.feedback_path,
            [item.recommendation for item in result.results],
            result.now,
            limit=settings.catalog.feedback_record_limit,
        )

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    strings = load_string_catalog()
    print(f"{strings.lookup('recommendations.title', result.language)} ({result.now.isoformat()})")
    for warning in result.meta.get("warnings", []):
        print(f"! {warning['code']}: {warning['message']}")
    for i, item in enumerate(result.results, start=1):
        print(f"{i:>2}. {trail_label(item.recommendation.trail)}  {one_line_summary(item)}")
        for text in item.reason_texts:
            print(f"    - {text}")
    return 0


def _cmd_trails(args: argparse.Namespace) -> int:
    settings = get_settings()
    trails = load_trails(args.path or settings.catalog.trails_path)
    if args.json:
        print(json.dumps([t.model_dump(mode="json") for t in trails], ensure_ascii=False, indent=2))
        return 0
    for t in trails:
        print(f"{t.id:<24} {trail_label(t)}")
    return 0


def _cmd_feedback(args: argparse.Namespace) -> int:
    settings = get_settings()
    now = parse_datetime(args.now, settings.app.timezone) if args.now else now_in(settings.app.timezone)
    updated = record_user_action(
        settings.catalog.feedback_path,
        args.trail_id,
        UserAction(args.action),
        now,
        window_seconds=int(args.window_minutes) * 60,
    )
    if updated is None:
        print(f"No recent recommendation found for '{args.trail_id}'.")
        return 1
    print(f"Recorded {updated.user_action.value} for {updated.trail_id}.")
    return 0


def _cmd_weather(args: argparse.Namespace) -> int:
    settings = get_settings()
    client = WeatherClient(settings, build_cache(settings))
    snapshot = client.get_snapshot(args.language or settings.app.default_language)
    if args.json:
        print(json.dumps(snapshot.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0
    print(
        f"{snapshot.location}: {snapshot.temperature_c:.1f}°C, humidity {snapshot.humidity}%, UV {snapshot.uv_index}"
    )
    if snapshot.warning_message:
        print(snapshot.warning_message)
    print(snapshot.suggestion)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the TrailScore CLI."""
    parser = argparse.ArgumentParser(prog="trailscore")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level.")
    sub = parser.add_subparsers(dest="command", required=True)

    rec = sub.add_parser("recommend", help="Rank catalog trails for your preferences and current context.")
    rec.add_argument("--difficulty", choices=[d.value for d in Difficulty], default=None)
    rec.add_argument("--fitness", choices=[f.value for f in FitnessLevel], default=None)
    rec.add_argument("--distance", type=str, default=None, help="Preferred distance in km, MIN-MAX (e.g. 5-10)")
    rec.add_argument("--duration", type=str, default=None, help="Preferred duration in minutes, MIN-MAX")
    rec.add_argument(
        "--scenery", action="append", default=[], choices=[s.value for s in SceneryType], help="Repeatable."
    )
    rec.add_argument("--now", type=str, default=None, help="ISO datetime (e.g. 2026-01-05T07:00+08:00)")
    rec.add_argument("--available-hours", dest="available_hours", type=float, default=None)
    rec.add_argument("--language", choices=["en", "zh-Hant"], default=None)
    rec.add_argument("--max-results", type=int, default=None)
    rec.add_argument("--live-weather", action="store_true", help="Fetch current observatory weather")
    rec.add_argument("--no-learning", action="store_true", help="Ignore the feedback log (all weights 1.0)")
    rec.add_argument("--record", action="store_true", help="Append the shown results to the feedback log")
    rec.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    rec.set_defaults(func=_cmd_recommend)

    tr = sub.add_parser("trails", help="List the trail catalog.")
    tr.add_argument("--path", type=str, default=None, help="Catalog JSON path (defaults to settings)")
    tr.add_argument("--json", action="store_true")
    tr.set_defaults(func=_cmd_trails)

    fb = sub.add_parser("feedback", help="Record what you did with a recommended trail.")
    fb.add_argument("trail_id")
    fb.add_argument("action", choices=[a.value for a in UserAction])
    fb.add_argument("--now", type=str, default=None)
    fb.add_argument("--window-minutes", dest="window_minutes", type=int, default=60)
    fb.set_defaults(func=_cmd_feedback)

    w = sub.add_parser("weather", help="Fetch and print the current observatory weather.")
    w.add_argument("--language", choices=["en", "zh-Hant"], default=None)
    w.add_argument("--json", action="store_true")
    w.set_defaults(func=_cmd_weather)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m trailscore.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
