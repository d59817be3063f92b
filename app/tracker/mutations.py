"""Pure snapshot transforms — Snapshot × command → Snapshot.

Every function returns a new, normalized snapshot and leaves its inputs
untouched. When the command targets an id that does not exist the input
snapshot itself is returned, so callers can detect a no-op with `is`.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from app.tracker.models import (
    Goal,
    GoalInput,
    GoalProgressInput,
    Snapshot,
    WellnessEntry,
    WellnessInput,
    Workout,
    WorkoutInput,
)


def new_id() -> str:
    return uuid.uuid4().hex


def _stamp(previous: datetime | None) -> datetime:
    """Current UTC time, strictly after `previous`."""
    now = datetime.now(timezone.utc)
    if previous is not None and now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


def normalize(snapshot: Snapshot, previous: datetime | None = None) -> Snapshot:
    """Sort all three collections and refresh `last_updated`.

    Sorts are stable, so records sharing a date keep their relative order.
    Wellness entries are additionally collapsed to one per date, keeping the
    first occurrence.
    """
    seen = set()
    wellness = []
    for entry in sorted(snapshot.wellness, key=lambda e: e.date, reverse=True):
        if entry.date in seen:
            continue
        seen.add(entry.date)
        wellness.append(entry)

    return Snapshot(
        workouts=tuple(sorted(snapshot.workouts, key=lambda w: w.date, reverse=True)),
        wellness=tuple(wellness),
        goals=tuple(sorted(snapshot.goals, key=lambda g: g.target_date)),
        last_updated=_stamp(previous),
    )


def empty_snapshot(previous: datetime | None = None) -> Snapshot:
    return Snapshot(last_updated=_stamp(previous))


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


def add_workout(snapshot: Snapshot, fields: WorkoutInput) -> tuple[Snapshot, Workout]:
    workout = Workout(**fields.model_dump(), id=new_id(), completed=True)
    draft = snapshot.model_copy(update={"workouts": (workout, *snapshot.workouts)})
    return normalize(draft, snapshot.last_updated), workout


def toggle_workout_completion(snapshot: Snapshot, workout_id: str) -> Snapshot:
    if not any(w.id == workout_id for w in snapshot.workouts):
        return snapshot
    workouts = tuple(
        w.model_copy(update={"completed": not w.completed}) if w.id == workout_id else w
        for w in snapshot.workouts
    )
    return normalize(snapshot.model_copy(update={"workouts": workouts}), snapshot.last_updated)


def remove_workout(snapshot: Snapshot, workout_id: str) -> Snapshot:
    workouts = tuple(w for w in snapshot.workouts if w.id != workout_id)
    if len(workouts) == len(snapshot.workouts):
        return snapshot
    return normalize(snapshot.model_copy(update={"workouts": workouts}), snapshot.last_updated)


# ---------------------------------------------------------------------------
# Wellness
# ---------------------------------------------------------------------------


def upsert_wellness(snapshot: Snapshot, fields: WellnessInput) -> tuple[Snapshot, WellnessEntry]:
    """Replace the entry for `fields.date` wholesale, or insert a new one at the head."""
    entry = WellnessEntry(**fields.model_dump(), id=new_id())
    if any(e.date == entry.date for e in snapshot.wellness):
        wellness = tuple(entry if e.date == entry.date else e for e in snapshot.wellness)
    else:
        wellness = (entry, *snapshot.wellness)
    draft = snapshot.model_copy(update={"wellness": wellness})
    return normalize(draft, snapshot.last_updated), entry


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


def add_goal(snapshot: Snapshot, fields: GoalInput) -> tuple[Snapshot, Goal]:
    goal = Goal(
        **fields.model_dump(),
        id=new_id(),
        current_value=0.0,
        created_at=datetime.now(timezone.utc),
    )
    draft = snapshot.model_copy(update={"goals": (*snapshot.goals, goal)})
    return normalize(draft, snapshot.last_updated), goal


def update_goal_progress(snapshot: Snapshot, goal_id: str, value: float) -> Snapshot:
    """Set `current_value` verbatim. NaN and infinity raise ValidationError."""
    value = GoalProgressInput(current_value=value).current_value
    if not any(g.id == goal_id for g in snapshot.goals):
        return snapshot
    goals = tuple(
        g.model_copy(update={"current_value": value}) if g.id == goal_id else g
        for g in snapshot.goals
    )
    return normalize(snapshot.model_copy(update={"goals": goals}), snapshot.last_updated)


def remove_goal(snapshot: Snapshot, goal_id: str) -> Snapshot:
    goals = tuple(g for g in snapshot.goals if g.id != goal_id)
    if len(goals) == len(snapshot.goals):
        return snapshot
    return normalize(snapshot.model_copy(update={"goals": goals}), snapshot.last_updated)
