"""Snapshot store — sole owner of the canonical snapshot.

Each mutation runs one read-modify-persist-publish cycle under a single
lock: apply a pure transform from `mutations`, write the result, swap it in
as current, then notify subscribers. A failed write is logged and the new
snapshot is still published; the session carries on in memory until the
next successful write.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from pydantic import ValidationError

from app.tracker import features, mutations
from app.tracker.models import (
    DerivedMetrics,
    Goal,
    GoalInput,
    Snapshot,
    WellnessEntry,
    WellnessInput,
    Workout,
    WorkoutInput,
)
from app.tracker.storage import SnapshotStorage, StorageError

logger = logging.getLogger(__name__)

Subscriber = Callable[[Snapshot], None]


class SnapshotStore:
    def __init__(
        self,
        storage: SnapshotStorage,
        hydration_threshold: float = features.HYDRATION_THRESHOLD_LITERS,
        recent_weeks: int = features.RECENT_WEEKS,
    ):
        self._storage = storage
        self._hydration_threshold = hydration_threshold
        self._recent_weeks = recent_weeks
        self._lock = asyncio.Lock()
        self._subscribers: list[Subscriber] = []
        self._snapshot = mutations.empty_snapshot()
        self.persisted = False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def derived(self) -> DerivedMetrics:
        return features.derive(self._snapshot, self._hydration_threshold, self._recent_weeks)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback` for every published snapshot. Returns an unsubscribe handle."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _read_persisted(self) -> Snapshot | None:
        try:
            payload = await self._storage.read()
        except StorageError:
            logger.warning("Persisted snapshot unreadable; starting empty", exc_info=True)
            return None
        if payload is None:
            return None
        try:
            return Snapshot.model_validate_json(payload)
        except ValidationError as exc:
            first = exc.errors()[0]
            logger.warning(
                "Persisted snapshot is malformed (%d errors, first at %s: %s); starting empty",
                exc.error_count(),
                ".".join(str(part) for part in first["loc"]) or "<root>",
                first["msg"],
            )
            return None

    async def _commit(self, snapshot: Snapshot) -> None:
        """Persist then publish. Caller must hold the lock."""
        try:
            await self._storage.write(snapshot.model_dump_json())
            self.persisted = True
        except StorageError:
            logger.exception("Snapshot write failed; keeping in-memory state")
            self.persisted = False
        self._snapshot = snapshot
        self._publish(snapshot)

    def _publish(self, snapshot: Snapshot) -> None:
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Snapshot subscriber %r failed", callback)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> Snapshot:
        """Adopt the persisted snapshot (or an empty one) as current."""
        async with self._lock:
            stored = await self._read_persisted()
            if stored is None:
                snapshot = mutations.empty_snapshot(self._snapshot.last_updated)
                self.persisted = False
            else:
                snapshot = mutations.normalize(stored, stored.last_updated)
                self.persisted = True
            logger.info(
                "Loaded snapshot: %d workouts, %d wellness entries, %d goals",
                len(snapshot.workouts),
                len(snapshot.wellness),
                len(snapshot.goals),
            )
            self._snapshot = snapshot
            self._publish(snapshot)
            return snapshot

    async def reset(self) -> Snapshot:
        async with self._lock:
            snapshot = mutations.empty_snapshot(self._snapshot.last_updated)
            await self._commit(snapshot)
            return snapshot

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _apply(self, transform: Callable[[Snapshot], Snapshot]) -> Snapshot:
        async with self._lock:
            current = self._snapshot
            updated = transform(current)
            if updated is current:
                return current
            await self._commit(updated)
            return updated

    async def add_workout(self, fields: WorkoutInput) -> Workout:
        async with self._lock:
            snapshot, workout = mutations.add_workout(self._snapshot, fields)
            await self._commit(snapshot)
            return workout

    async def toggle_workout_completion(self, workout_id: str) -> Snapshot:
        return await self._apply(lambda s: mutations.toggle_workout_completion(s, workout_id))

    async def remove_workout(self, workout_id: str) -> Snapshot:
        return await self._apply(lambda s: mutations.remove_workout(s, workout_id))

    async def upsert_wellness(self, fields: WellnessInput) -> WellnessEntry:
        async with self._lock:
            snapshot, entry = mutations.upsert_wellness(self._snapshot, fields)
            await self._commit(snapshot)
            return entry

    async def add_goal(self, fields: GoalInput) -> Goal:
        async with self._lock:
            snapshot, goal = mutations.add_goal(self._snapshot, fields)
            await self._commit(snapshot)
            return goal

    async def update_goal_progress(self, goal_id: str, value: float) -> Snapshot:
        return await self._apply(lambda s: mutations.update_goal_progress(s, goal_id, value))

    async def remove_goal(self, goal_id: str) -> Snapshot:
        return await self._apply(lambda s: mutations.remove_goal(s, goal_id))
