import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import settings
from app.db import async_session
from app.tracker.router import router as tracker_router
from app.tracker.storage import SqlSnapshotStorage
from app.tracker.store import SnapshotStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = SnapshotStore(
        SqlSnapshotStorage(async_session, settings.snapshot_key),
        hydration_threshold=settings.hydration_threshold_liters,
        recent_weeks=settings.recent_weeks,
    )
    await store.load()
    app.state.store = store
    yield


app = FastAPI(title="FitnessDashboard", version="0.1.0", lifespan=lifespan)
app.include_router(tracker_router)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "tracker": {
            "snapshot": "/tracker/snapshot",
            "metrics": "/tracker/metrics",
            "workouts": "/tracker/workouts",
            "workout_toggle": "/tracker/workouts/{id}/toggle",
            "wellness": "/tracker/wellness",
            "goals": "/tracker/goals",
            "goal_progress": "/tracker/goals/{id}/progress",
            "reset": "/tracker/reset",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
