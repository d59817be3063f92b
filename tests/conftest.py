"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.tracker.models import GoalInput, WellnessInput, WorkoutInput
from app.tracker.router import get_store
from app.tracker.storage import StorageError
from app.tracker.store import SnapshotStore


# ---------------------------------------------------------------------------
# Fake storage (no real database needed)
# ---------------------------------------------------------------------------

class FakeStorage:
    """In-memory stand-in for SqlSnapshotStorage."""

    def __init__(
        self,
        payload: str | None = None,
        fail_reads: bool = False,
        fail_writes: bool = False,
    ):
        self.payload = payload
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes: list[str] = []

    async def read(self) -> str | None:
        if self.fail_reads:
            raise StorageError("storage unavailable")
        return self.payload

    async def write(self, payload: str) -> None:
        if self.fail_writes:
            raise StorageError("quota exceeded")
        self.payload = payload
        self.writes.append(payload)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_storage():
    return FakeStorage()


@pytest.fixture()
def store(fake_storage):
    return SnapshotStore(fake_storage)


@pytest.fixture()
def override_store(store):
    """Override the FastAPI dependency so no lifespan / database is needed."""
    app.dependency_overrides[get_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_store):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Input builders
# ---------------------------------------------------------------------------

def make_workout(
    day: date = date(2026, 2, 15),
    category: str = "strength",
    duration_minutes: int = 45,
    calories: int = 350,
    **overrides: Any,
) -> WorkoutInput:
    fields: dict[str, Any] = {
        "name": "Session",
        "date": day,
        "category": category,
        "intensity": "moderate",
        "duration_minutes": duration_minutes,
        "calories": calories,
    }
    fields.update(overrides)
    return WorkoutInput(**fields)


def make_wellness(
    day: date = date(2026, 2, 15),
    water_liters: float = 2.5,
    sleep_hours: float = 7.5,
    **overrides: Any,
) -> WellnessInput:
    fields: dict[str, Any] = {
        "date": day,
        "sleep_hours": sleep_hours,
        "water_liters": water_liters,
        "mood": "balanced",
        "energy_level": 7,
    }
    fields.update(overrides)
    return WellnessInput(**fields)


def make_goal(
    target_date: date = date(2026, 3, 8),
    target_value: float = 8.0,
    **overrides: Any,
) -> GoalInput:
    fields: dict[str, Any] = {
        "title": "Train consistently",
        "unit": "workouts",
        "target_value": target_value,
        "target_date": target_date,
    }
    fields.update(overrides)
    return GoalInput(**fields)
