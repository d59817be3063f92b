from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./fitness.db"
    snapshot_key: str = "fitness-snapshot"  # Single fixed key for the persisted snapshot
    log_level: str = "INFO"

    # Derived metrics
    hydration_threshold_liters: float = 2.0  # Minimum water for a day to count toward the streak
    recent_weeks: int = 4  # Weeks shown by the weekly progress chart

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
