"""
Domain models (Pydantic).

These types are the stable contract between layers:
- catalog entities (`Trail`) and behavioral signals (`HikeRecord`, `RecommendationRecord`)
- scoring inputs (`UserPreference`, `WeatherSnapshot`)
- engine output (`TrailRecommendation`) and the app-layer envelope (`RecommendationResult`)

Enumerations carry no behavior; their associated data (fitness level -> suitable
difficulties, scenery -> keywords) lives in static lookup tables so the scoring code
stays free of presentation concerns.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator


class Difficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


class FitnessLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class SceneryType(str, Enum):
    SEA = "sea"
    MOUNTAIN = "mountain"
    FOREST = "forest"
    RESERVOIR = "reservoir"
    CITY = "city"
    SUNSET = "sunset"
    SUNRISE = "sunrise"


class UserAction(str, Enum):
    """What the user did with a recommendation."""

    VIEWED = "viewed"
    PLANNED = "planned"
    COMPLETED = "completed"
    DISMISSED = "dismissed"


FITNESS_RECOMMENDED_DIFFICULTIES: dict[FitnessLevel, frozenset[Difficulty]] = {
    FitnessLevel.BEGINNER: frozenset({Difficulty.EASY}),
    FitnessLevel.INTERMEDIATE: frozenset({Difficulty.EASY, Difficulty.MODERATE}),
    FitnessLevel.ADVANCED: frozenset({Difficulty.MODERATE, Difficulty.CHALLENGING}),
    FitnessLevel.EXPERT: frozenset({Difficulty.MODERATE, Difficulty.CHALLENGING}),
}


class Trail(BaseModel):
    """A hiking route in the catalog."""

    id: str
    name: str
    summary: str = ""
    district: str = ""
    length_km: float = Field(..., ge=0)
    elevation_gain_m: float = Field(0, ge=0)
    estimated_duration_minutes: int = Field(..., ge=0)
    difficulty: Difficulty
    is_favorite: bool = False
    highlights: list[str] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _strip_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("trail id must not be empty")
        return value


class WeatherSnapshot(BaseModel):
    """A point-in-time weather reading (staleness is the caller's concern)."""

    location: str
    temperature_c: float
    humidity: int = Field(..., ge=0, le=100)
    uv_index: int = Field(0, ge=0)
    warning_message: str | None = None
    suggestion: str = ""
    updated_at: datetime


class DistanceRange(BaseModel):
    min_km: float = Field(..., ge=0)
    max_km: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _validate_order(self) -> "DistanceRange":
        if self.min_km > self.max_km:
            raise ValueError("preferred_distance.min_km must not exceed max_km")
        return self

    def contains(self, km: float) -> bool:
        return self.min_km <= km <= self.max_km


class DurationRange(BaseModel):
    min_minutes: int = Field(..., ge=0)
    max_minutes: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _validate_order(self) -> "DurationRange":
        if self.min_minutes > self.max_minutes:
            raise ValueError("preferred_duration.min_minutes must not exceed max_minutes")
        return self

    def contains(self, minutes: float) -> bool:
        return self.min_minutes <= minutes <= self.max_minutes


class UserPreference(BaseModel):
    """The user's stated hiking preferences (every field optional in practice)."""

    preferred_difficulty: Difficulty | None = None
    fitness_level: FitnessLevel = FitnessLevel.INTERMEDIATE
    preferred_distance: DistanceRange | None = None
    preferred_duration: DurationRange | None = None
    preferred_scenery: list[SceneryType] = Field(default_factory=list)

    @property
    def recommended_difficulties(self) -> frozenset[Difficulty]:
        return FITNESS_RECOMMENDED_DIFFICULTIES[self.fitness_level]


class HikeRecord(BaseModel):
    """A completed or attempted hike, used as a historical signal."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    trail_id: str | None = None
    trail_name: str | None = None
    start_time: datetime
    is_completed: bool = False
    distance_km: float = Field(0, ge=0)


class TrailRecommendation(BaseModel):
    """One ranked engine output: the trail, its clamped score and reason identifiers."""

    trail: Trail
    score: float = Field(..., ge=0, le=1)
    reasons: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        return self.trail.id

    @computed_field  # type: ignore[prop-decorator]
    @property
    def match_percentage(self) -> int:
        # Built-in round(): exact halves go to the even neighbour (0.125 -> 12, 0.375 -> 38).
        return min(int(round(self.score * 100)), 100)


class RecommendationRecord(BaseModel):
    """A recommendation shown to the user, plus their reaction (feedback log entry)."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    trail_id: str
    recommended_at: datetime
    user_action: UserAction | None = None
    recommendation_score: float = Field(0, ge=0, le=1)
    reasons: list[str] = Field(default_factory=list)


class RecommendationRequest(BaseModel):
    """App-layer request payload for a recommendation run (API/CLI)."""

    preference: UserPreference | None = None
    weather: WeatherSnapshot | None = None
    now: datetime | None = None
    available_time_seconds: float | None = Field(default=None, ge=0)
    language: Literal["en", "zh-Hant"] | None = None
    max_results: int | None = Field(default=None, ge=1, le=100)
    use_live_weather: bool = False
    learn_from_feedback: bool = True
    settings_overrides: dict[str, Any] | None = None


class RecommendationItem(BaseModel):
    """One ranked output item with reasons resolved for display."""

    recommendation: TrailRecommendation
    reason_texts: list[str] = Field(default_factory=list)


class RecommendationResult(BaseModel):
    """Top-N recommendations plus the normalized query and run metadata."""

    generated_at: datetime
    now: datetime
    language: str
    results: list[RecommendationItem]
    meta: dict[str, Any] = Field(default_factory=dict)


class FeedbackRequest(BaseModel):
    """API payload for recording what the user did with a recommendation."""

    trail_id: str
    action: UserAction
