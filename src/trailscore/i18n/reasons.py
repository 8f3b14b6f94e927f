"""
Reason localization.

Resolves reason identifiers (`difficulty-match`, ...) to display text for an
explicitly passed language. Resolution order:

1. the language's explicit reason table (`reasons:` in `strings.yaml`);
2. the generic lookup: language table -> primary (English) table -> raw key;
3. if step 2 echoed the raw key back, the caller's fallback text
   (default: the built-in English text for that reason).

Step 1 keeps a secondary-language UI from showing primary-language text when only
the generic table is incomplete; step 3 keeps internal keys off the screen.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from typing import Any, Iterable, Mapping

import yaml

from trailscore.domain import reasons as R

REASON_KEY_PREFIX = "recommendations.reason."

REASON_FALLBACKS: dict[str, str] = {
    R.DIFFICULTY_MATCH: "Matches your preferred difficulty",
    R.FITNESS_LEVEL_MATCH: "Suitable for your fitness level",
    R.DISTANCE_MATCH: "Distance fits your preference",
    R.DURATION_MATCH: "Duration fits your preference",
    R.SCENERY_MATCH: "Includes scenery you like",
    R.WEATHER_TEMPERATURE_GOOD: "Comfortable temperature for hiking",
    R.WEATHER_HOT_SHADE: "Hot weather, recommended trail with shade or near water",
    R.WEATHER_UV_HIGH: "High UV index, remember sun protection",
    R.TIME_SUNRISE: "Great for an early-morning sunrise hike",
    R.TIME_SUNSET: "Great for an evening sunset hike",
    R.TIME_ENOUGH: "You have enough time to complete this trail",
    R.TIME_TIGHT: "Time is a bit tight, consider a faster pace",
    R.HISTORY_NEW_TRAIL: "You haven't tried this trail yet",
    R.HISTORY_OFTEN_COMPLETED: "You often complete similar trails",
    R.HISTORY_DISTANCE_SIMILAR: "Distance is similar to your usual hikes",
}


def reason_key(reason_id: str) -> str:
    """`history-new-trail` -> `recommendations.reason.history.new.trail`."""
    return REASON_KEY_PREFIX + reason_id.replace("-", ".")


class StringCatalog:
    """Per-language string tables plus explicit per-language reason tables."""

    def __init__(
        self,
        tables: Mapping[str, Mapping[str, str]],
        *,
        reason_tables: Mapping[str, Mapping[str, str]] | None = None,
        primary_language: str = "en",
    ):
        if primary_language not in tables:
            raise ValueError(f"Primary language '{primary_language}' has no string table.")
        self._tables = {lang: dict(t or {}) for lang, t in tables.items()}
        self._reason_tables = {lang: dict(t or {}) for lang, t in (reason_tables or {}).items()}
        self._primary = primary_language

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StringCatalog":
        tables = data.get("tables")
        if not isinstance(tables, Mapping) or not tables:
            raise ValueError("String catalog must define a non-empty 'tables' mapping.")
        return cls(
            tables,
            reason_tables=data.get("reasons") or {},
            primary_language=str(data.get("primary_language") or "en"),
        )

    @property
    def languages(self) -> list[str]:
        return sorted(self._tables)

    def require_language(self, language: str) -> str:
        if language not in self._tables:
            raise ValueError(
                f"Unsupported language '{language}'. Expected one of: {', '.join(self.languages)}"
            )
        return language

    def lookup(self, key: str, language: str) -> str:
        """Generic lookup: active language, then primary language, then the raw key."""
        self.require_language(language)
        value = self._tables[language].get(key)
        if value:
            return value
        return self._tables[self._primary].get(key) or key

    def reason_override(self, key: str, language: str) -> str | None:
        return self._reason_tables.get(language, {}).get(key) or None


@lru_cache
def load_string_catalog() -> StringCatalog:
    """Load the packaged `strings.yaml` (cached)."""
    text = resources.files("trailscore.i18n").joinpath("strings.yaml").read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("Invalid YAML root object for strings.yaml; expected a mapping.")
    return StringCatalog.from_mapping(data)


def localize_reason(
    reason_id: str,
    language: str,
    *,
    catalog: StringCatalog | None = None,
    fallback: str | None = None,
) -> str:
    catalog = catalog or load_string_catalog()
    key = reason_key(reason_id)

    explicit = catalog.reason_override(key, catalog.require_language(language))
    if explicit:
        return explicit

    value = catalog.lookup(key, language)
    if value == key:
        return fallback if fallback is not None else REASON_FALLBACKS.get(reason_id, reason_id)
    return value


def localize_reasons(
    reason_ids: Iterable[str], language: str, *, catalog: StringCatalog | None = None
) -> list[str]:
    catalog = catalog or load_string_catalog()
    return [localize_reason(r, language, catalog=catalog) for r in reason_ids]
