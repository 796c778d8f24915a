"""Runtime settings, read from ``PANTRY_*`` environment variables or ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    data_dir: Path = _PROJECT_ROOT / "data"
    store_file: str = "pantry.json"

    # Seconds a commit waits for the store lock before failing with a conflict
    lock_timeout: float = 2.0
    # Seconds after which a lock file left by a dead writer is broken
    lock_stale_after: float = 30.0

    # Alerts
    expiry_window_days: int = 7
    low_stock_threshold: int = 10

    log_level: str = "WARNING"

    model_config = SettingsConfigDict(env_prefix="PANTRY_", env_file=".env", extra="ignore")

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.store_file


settings = Settings()
