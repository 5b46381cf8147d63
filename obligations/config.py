from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def load_env(base: Path | None = None) -> None:
    base = base or Path.cwd()
    env_name = os.getenv("APP_ENV", "development")
    env_path = base / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    env_specific = base / f".env.{env_name}"
    if env_specific.exists():
        load_dotenv(env_specific, override=True)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    generation_horizon_days: int = 365
    scoring_window_days: int = 365
    recent_activity_days: int = 30
    strict_generation: bool = False


load_env()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set. Create a .env file with your connection string.")

SETTINGS = Settings(
    database_url=DATABASE_URL,
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
    generation_horizon_days=int(os.getenv("GENERATION_HORIZON_DAYS", "365")),
    scoring_window_days=int(os.getenv("SCORING_WINDOW_DAYS", "365")),
    recent_activity_days=int(os.getenv("RECENT_ACTIVITY_DAYS", "30")),
    strict_generation=_env_flag("STRICT_GENERATION"),
)
