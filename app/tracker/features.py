"""Pure stateless derivations over a snapshot — math only, never raises."""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from app.tracker.models import (
    DerivedMetrics,
    Goal,
    GoalProgress,
    Snapshot,
    Totals,
    WeekBucket,
    WellnessEntry,
    Workout,
)

HYDRATION_THRESHOLD_LITERS = 2.0
RECENT_WEEKS = 4


def week_start_of(day: date | datetime) -> date:
    """Sunday that starts the calendar week containing `day`.

    Weeks run Sunday through Saturday. Datetimes are reduced to their own
    calendar date first, so the time of day never moves a record into
    another bucket.
    """
    if isinstance(day, datetime):
        day = day.date()
    # weekday(): Monday=0 … Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def totals(workouts: Iterable[Workout]) -> Totals:
    result = Totals()
    for w in workouts:
        result.total_workouts += 1
        result.total_minutes += w.duration_minutes
        result.total_calories += w.calories
    return result


def weekly_series(workouts: Iterable[Workout]) -> list[WeekBucket]:
    """Minutes, calories and sessions per week, ascending by week start."""
    buckets: dict[date, WeekBucket] = {}
    for w in workouts:
        key = week_start_of(w.date)
        bucket = buckets.setdefault(key, WeekBucket(week_start=key))
        bucket.minutes += w.duration_minutes
        bucket.calories += w.calories
        bucket.sessions += 1
    return [buckets[k] for k in sorted(buckets)]


def recent_weeks(series: Sequence[WeekBucket], count: int = RECENT_WEEKS) -> list[WeekBucket]:
    if count <= 0:
        return []
    return list(series[-count:])


def category_histogram(workouts: Iterable[Workout]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for w in workouts:
        key = w.category.value
        counts[key] = counts.get(key, 0) + 1
    return counts


def category_shares(histogram: dict[str, int]) -> dict[str, int]:
    """Rounded percentage of workouts per category. Empty input → {}."""
    total = sum(histogram.values())
    if total <= 0:
        return {}
    return {name: round(count / total * 100) for name, count in histogram.items()}


def hydration_streak(
    entries: Iterable[WellnessEntry],
    threshold: float = HYDRATION_THRESHOLD_LITERS,
) -> int:
    """Consecutive entries meeting `threshold`, counted from the most recent.

    Expects entries newest-first (snapshot order). The first entry under the
    threshold ends the streak.
    """
    streak = 0
    for entry in entries:
        if entry.water_liters < threshold:
            break
        streak += 1
    return streak


def average_sleep_hours(entries: Sequence[WellnessEntry]) -> float:
    if not entries:
        return 0.0
    return sum(e.sleep_hours for e in entries) / len(entries)


def latest_wellness(entries: Sequence[WellnessEntry]) -> WellnessEntry | None:
    return entries[0] if entries else None


def goal_progress(goal: Goal) -> GoalProgress:
    """Percentage toward target (capped at 100) and what is left to go.

    `remaining` goes negative once the target is overshot. A non-finite
    progress value counts as no progress.
    """
    if not math.isfinite(goal.current_value):
        return GoalProgress(goal_id=goal.id, percentage=0, remaining=goal.target_value)
    pct = min(100, round(goal.current_value / goal.target_value * 100))
    return GoalProgress(
        goal_id=goal.id,
        percentage=pct,
        remaining=goal.target_value - goal.current_value,
    )


def derive(
    snapshot: Snapshot,
    hydration_threshold: float = HYDRATION_THRESHOLD_LITERS,
    weeks: int = RECENT_WEEKS,
) -> DerivedMetrics:
    """Full metrics bundle for one snapshot."""
    series = weekly_series(snapshot.workouts)
    histogram = category_histogram(snapshot.workouts)
    return DerivedMetrics(
        totals=totals(snapshot.workouts),
        weekly_series=series,
        recent_weeks=recent_weeks(series, weeks),
        categories=histogram,
        category_shares=category_shares(histogram),
        hydration_streak=hydration_streak(snapshot.wellness, hydration_threshold),
        average_sleep_hours=average_sleep_hours(snapshot.wellness),
        latest_wellness=latest_wellness(snapshot.wellness),
        goal_progress=[goal_progress(g) for g in snapshot.goals],
    )
