"""
Application settings (Pydantic).

Settings are loaded from `src/trailscore/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `TRAILSCORE_LOG_LEVEL`, `TRAILSCORE_LANGUAGE`)
- an external YAML file via `TRAILSCORE_CONFIG_PATH`

Design rule:
- Scoring knobs live in YAML, not hard-coded in the factor functions.
  The pydantic defaults below mirror `defaults.yaml` so the engine can also run
  with a plain `ScoringSettings()` (no file access).
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, model_validator

from trailscore.core.env import load_dotenv_if_present

Language = Literal["en", "zh-Hant"]


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `trailscore.config`."""
    text = resources.files("trailscore.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "TrailScore"
    timezone: str = "Asia/Hong_Kong"
    http_timeout_seconds: float = 10
    log_level: str = "INFO"
    default_language: Language = "en"


class CacheSettings(BaseModel):
    enabled: bool = True
    dir: str = ".cache/trailscore"
    default_ttl_seconds: int = 60 * 60


class CatalogSettings(BaseModel):
    trails_path: str = "data/catalogs/trails.json"
    history_path: str = "data/history/hike_records.json"
    feedback_path: str = "data/history/recommendation_records.json"
    feedback_record_limit: int = Field(10, ge=0)


class WeatherIngestionSettings(BaseModel):
    base_url: str = "https://data.weather.gov.hk/weatherAPI/opendata/weather.php"
    data_type: str = "rhrread"
    preferred_place: str = "Hong Kong Observatory"
    cache_ttl_seconds: int = 10 * 60


class IngestionSettings(BaseModel):
    weather: WeatherIngestionSettings = Field(default_factory=WeatherIngestionSettings)


class HourWindow(BaseModel):
    """Half-open hour window `[start_hour, end_hour)`."""

    start_hour: int = Field(..., ge=0, le=23)
    end_hour: int = Field(..., ge=1, le=24)

    @model_validator(mode="after")
    def _validate_order(self) -> "HourWindow":
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be after start_hour")
        return self

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour


class TemperatureWindowC(BaseModel):
    min: float = 15
    max: float = 25


class PreferenceRules(BaseModel):
    difficulty_match: float = 0.2
    fitness_level_match: float = 0.15
    distance_match: float = 0.15
    duration_match: float = 0.15
    scenery_match: float = 0.1
    # None keeps one bonus per matching scenery category.
    max_scenery_matches: int | None = Field(default=None, ge=0)


class WeatherRules(BaseModel):
    comfort_temperature_c: TemperatureWindowC = Field(default_factory=TemperatureWindowC)
    comfort_bonus: float = 0.1
    hot_shade_bonus: float = 0.05
    high_uv_index: int = 8


class TimeOfDayRules(BaseModel):
    sunrise_hours: HourWindow = Field(default_factory=lambda: HourWindow(start_hour=5, end_hour=9))
    sunset_hours: HourWindow = Field(default_factory=lambda: HourWindow(start_hour=16, end_hour=19))
    bonus: float = 0.1


class AvailableTimeRules(BaseModel):
    enough_bonus: float = 0.1
    tight_ratio: float = Field(0.7, ge=0, le=1)
    tight_bonus: float = 0.05
    shortfall_penalty: float = Field(0.1, ge=0)


class HistoryRules(BaseModel):
    new_trail_bonus: float = 0.1
    completion_rate_threshold: float = Field(0.7, ge=0, le=1)
    often_completed_bonus: float = 0.15
    distance_tolerance: float = Field(0.3, ge=0)
    distance_similar_bonus: float = 0.1


class DiversityRules(BaseModel):
    recent_days: int = Field(30, ge=0)
    fresh_bonus: float = 0.05
    repeat_penalty: float = Field(0.1, ge=0)


class ScoringSettings(BaseModel):
    base_score: float = Field(0.5, ge=0, le=1)
    min_score: float = Field(0.3, ge=0, le=1)
    top_n_default: int = Field(10, ge=1)
    preference: PreferenceRules = Field(default_factory=PreferenceRules)
    weather: WeatherRules = Field(default_factory=WeatherRules)
    time_of_day: TimeOfDayRules = Field(default_factory=TimeOfDayRules)
    available_time: AvailableTimeRules = Field(default_factory=AvailableTimeRules)
    history: HistoryRules = Field(default_factory=HistoryRules)
    diversity: DiversityRules = Field(default_factory=DiversityRules)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)
    cache_dir = os.getenv("TRAILSCORE_CACHE_DIR")
    if cache_dir:
        data.setdefault("cache", {})["dir"] = cache_dir

    log_level = os.getenv("TRAILSCORE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    language = os.getenv("TRAILSCORE_LANGUAGE")
    if language:
        data.setdefault("app", {})["default_language"] = language

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("TRAILSCORE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
