"""Snapshot contract — Pydantic v2 models.

Persisted entities are frozen and snapshot collections are tuples, so a
published snapshot can be handed to any consumer without copying.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class Category(str, Enum):
    strength = "strength"
    cardio = "cardio"
    mobility = "mobility"
    sports = "sports"
    other = "other"


class Intensity(str, Enum):
    light = "light"
    moderate = "moderate"
    intense = "intense"


class Mood(str, Enum):
    low = "low"
    balanced = "balanced"
    energized = "energized"


class GoalUnit(str, Enum):
    workouts = "workouts"
    minutes = "minutes"
    calories = "calories"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


# ---------------------------------------------------------------------------
# Caller-supplied fields
# ---------------------------------------------------------------------------


class WorkoutInput(_Frozen):
    name: str = Field(min_length=1)
    date: date
    category: Category = Category.strength
    intensity: Intensity = Intensity.moderate
    duration_minutes: int = Field(gt=0)
    calories: int = Field(ge=0)
    notes: str | None = None


class WellnessInput(_Frozen):
    date: date
    sleep_hours: float = Field(ge=0)
    water_liters: float = Field(ge=0)
    mood: Mood = Mood.balanced
    energy_level: int = Field(ge=1, le=10)


class GoalInput(_Frozen):
    title: str = Field(min_length=1)
    unit: GoalUnit = GoalUnit.workouts
    target_value: float = Field(gt=0)
    target_date: date


class GoalProgressInput(_Frozen):
    current_value: float = Field(allow_inf_nan=False)  # Not checked against the target


# ---------------------------------------------------------------------------
# Stored records
# ---------------------------------------------------------------------------


class Workout(WorkoutInput):
    id: str
    completed: bool = True


class WellnessEntry(WellnessInput):
    id: str


class Goal(GoalInput):
    id: str
    current_value: float = Field(default=0.0, allow_inf_nan=False)
    created_at: AwareDatetime


class Snapshot(_Frozen):
    """Aggregate root — the unit of persistence and of publication."""

    workouts: tuple[Workout, ...] = ()
    wellness: tuple[WellnessEntry, ...] = ()
    goals: tuple[Goal, ...] = ()
    last_updated: AwareDatetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Derived metrics
# ---------------------------------------------------------------------------


class Totals(BaseModel):
    total_workouts: int = 0
    total_minutes: int = 0
    total_calories: int = 0


class WeekBucket(BaseModel):
    week_start: date  # Sunday
    minutes: int = 0
    calories: int = 0
    sessions: int = 0


class GoalProgress(BaseModel):
    goal_id: str
    percentage: int  # Capped at 100
    remaining: float


class DerivedMetrics(BaseModel):
    """Everything the dashboard renders that is not stored directly."""

    totals: Totals = Field(default_factory=Totals)
    weekly_series: list[WeekBucket] = Field(default_factory=list)
    recent_weeks: list[WeekBucket] = Field(default_factory=list)
    categories: dict[str, int] = Field(default_factory=dict)
    category_shares: dict[str, int] = Field(default_factory=dict)
    hydration_streak: int = 0
    average_sleep_hours: float = 0.0
    latest_wellness: WellnessEntry | None = None
    goal_progress: list[GoalProgress] = Field(default_factory=list)
