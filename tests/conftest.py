from __future__ import annotations

import json
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from trailscore.config.settings import CacheSettings, CatalogSettings, Settings
from trailscore.domain.models import Difficulty, HikeRecord, Trail

HK = ZoneInfo("Asia/Hong_Kong")


def make_trail(
    trail_id: str = "valley-path",
    *,
    name: str = "Valley Path",
    summary: str = "",
    length_km: float = 8.0,
    minutes: int = 180,
    difficulty: Difficulty = Difficulty.EASY,
) -> Trail:
    return Trail(
        id=trail_id,
        name=name,
        summary=summary,
        length_km=length_km,
        estimated_duration_minutes=minutes,
        difficulty=difficulty,
    )


def make_hike(
    trail: Trail | None,
    *,
    now: datetime,
    days_ago: float,
    completed: bool = True,
    distance_km: float = 0.0,
    by_name_only: bool = False,
) -> HikeRecord:
    return HikeRecord(
        trail_id=None if (trail is None or by_name_only) else trail.id,
        trail_name=trail.name if trail is not None else "Somewhere Else",
        start_time=now - timedelta(days=days_ago),
        is_completed=completed,
        distance_km=distance_km,
    )


@pytest.fixture
def now() -> datetime:
    # 12:00 sits outside both the sunrise and sunset windows.
    return datetime(2026, 1, 5, 12, 0, tzinfo=HK)


@pytest.fixture
def catalog_trails() -> list[Trail]:
    return [
        make_trail("easy-reservoir", name="Reservoir Loop", summary="shaded walk by the water", length_km=5, minutes=120),
        make_trail(
            "ridge-sunset",
            name="West Ridge",
            summary="mountain ridge facing the sunset",
            length_km=9,
            minutes=240,
            difficulty=Difficulty.MODERATE,
        ),
        make_trail(
            "long-peak",
            name="Long Peak Traverse",
            summary="exposed peak scramble",
            length_km=15,
            minutes=420,
            difficulty=Difficulty.CHALLENGING,
        ),
    ]


@pytest.fixture
def settings(tmp_path, catalog_trails) -> Settings:
    """Settings whose catalog/history/feedback/cache paths all live under `tmp_path`."""
    trails_path = tmp_path / "trails.json"
    trails_path.write_text(
        json.dumps([t.model_dump(mode="json") for t in catalog_trails], ensure_ascii=False),
        encoding="utf-8",
    )
    return Settings(
        cache=CacheSettings(dir=str(tmp_path / "cache")),
        catalog=CatalogSettings(
            trails_path=str(trails_path),
            history_path=str(tmp_path / "history.json"),
            feedback_path=str(tmp_path / "feedback.json"),
        ),
    )
