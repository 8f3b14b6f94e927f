# src/trailscore/features/scenery.py
"""
Keyword matching over trail descriptive text.

Trail catalogs rarely carry structured scenery tags, so scenery (and the shade,
sunrise and sunset hints used by the weather and time-of-day factors) is inferred
from the lowercased trail name + summary. Keyword lists cover the Traditional
Chinese and English wording used in Hong Kong trail descriptions.
"""

from __future__ import annotations

from typing import Iterable

from trailscore.domain.models import SceneryType, Trail

SCENERY_KEYWORDS: dict[SceneryType, tuple[str, ...]] = {
    SceneryType.SEA: ("海", "海邊", "海岸", "beach", "coast", "sea"),
    SceneryType.MOUNTAIN: ("山", "峰", "嶺", "mountain", "peak", "ridge"),
    SceneryType.FOREST: ("林", "樹", "森", "forest", "tree", "wood"),
    SceneryType.RESERVOIR: ("水庫", "湖", "reservoir", "lake"),
    SceneryType.CITY: ("城市", "市區", "city", "urban"),
    SceneryType.SUNSET: ("日落", "夕陽", "sunset", "evening"),
    SceneryType.SUNRISE: ("日出", "晨曦", "sunrise", "dawn"),
}

# Hot-weather relief: coastline, streams or tree cover.
SHADE_OR_WATER_KEYWORDS: tuple[str, ...] = ("海", "水", "樹", "sea", "water", "tree")
SUNRISE_KEYWORDS: tuple[str, ...] = ("日出", "東", "sunrise", "east")
SUNSET_KEYWORDS: tuple[str, ...] = ("日落", "西", "sunset", "west")


def trail_text(trail: Trail) -> str:
    """Lowercased `name + " " + summary`, the text every keyword test runs against."""
    return f"{trail.name} {trail.summary}".lower()


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(k in text for k in keywords)


def matches_scenery(text: str, scenery: SceneryType) -> bool:
    """True when `text` (already lowercased) mentions any keyword for `scenery`."""
    return contains_any(text, SCENERY_KEYWORDS.get(scenery, ()))


def matched_scenery(text: str, sceneries: Iterable[SceneryType]) -> list[SceneryType]:
    """Return the categories from `sceneries` that match, in the caller's order."""
    return [s for s in sceneries if matches_scenery(text, s)]
