"""Tracker HTTP router — snapshot reads, derived metrics, mutations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from app.tracker.models import (
    DerivedMetrics,
    Goal,
    GoalInput,
    GoalProgressInput,
    Snapshot,
    WellnessEntry,
    WellnessInput,
    Workout,
    WorkoutInput,
)
from app.tracker.store import SnapshotStore

router = APIRouter(prefix="/tracker", tags=["tracker"])


def get_store(request: Request) -> SnapshotStore:
    return request.app.state.store


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get("/snapshot", response_model=Snapshot)
async def read_snapshot(store: SnapshotStore = Depends(get_store)) -> Snapshot:
    return store.snapshot


@router.get("/metrics", response_model=DerivedMetrics)
async def read_metrics(store: SnapshotStore = Depends(get_store)) -> DerivedMetrics:
    return store.derived()


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


@router.post("/workouts", response_model=Workout, status_code=201)
async def create_workout(body: WorkoutInput, store: SnapshotStore = Depends(get_store)) -> Workout:
    return await store.add_workout(body)


@router.post("/workouts/{workout_id}/toggle", response_model=Snapshot)
async def toggle_workout(workout_id: str, store: SnapshotStore = Depends(get_store)) -> Snapshot:
    return await store.toggle_workout_completion(workout_id)


@router.delete("/workouts/{workout_id}", response_model=Snapshot)
async def delete_workout(workout_id: str, store: SnapshotStore = Depends(get_store)) -> Snapshot:
    return await store.remove_workout(workout_id)


# ---------------------------------------------------------------------------
# Wellness
# ---------------------------------------------------------------------------


@router.put("/wellness", response_model=WellnessEntry)
async def put_wellness(body: WellnessInput, store: SnapshotStore = Depends(get_store)) -> WellnessEntry:
    return await store.upsert_wellness(body)


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


@router.post("/goals", response_model=Goal, status_code=201)
async def create_goal(body: GoalInput, store: SnapshotStore = Depends(get_store)) -> Goal:
    return await store.add_goal(body)


@router.put("/goals/{goal_id}/progress", response_model=Snapshot)
async def put_goal_progress(
    goal_id: str,
    body: GoalProgressInput,
    store: SnapshotStore = Depends(get_store),
) -> Snapshot:
    return await store.update_goal_progress(goal_id, body.current_value)


@router.delete("/goals/{goal_id}", response_model=Snapshot)
async def delete_goal(goal_id: str, store: SnapshotStore = Depends(get_store)) -> Snapshot:
    return await store.remove_goal(goal_id)


# ---------------------------------------------------------------------------
# Reset
# ---------------------------------------------------------------------------


@router.post("/reset", response_model=Snapshot)
async def reset(store: SnapshotStore = Depends(get_store)) -> Snapshot:
    return await store.reset()
