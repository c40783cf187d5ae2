"""Runtime settings, read from ``STOCKBOOK_*`` environment variables or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKBOOK_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = _PROJECT_ROOT / "data"
    data_file: str = "stockbook.json"
    log_level: str = "WARNING"

    # STOCK
    low_stock_threshold: int = Field(default=10, ge=0)
    projection_horizon_days: list[int] = Field(default_factory=lambda: [15, 30])

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.data_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
