from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from obligations.config import SETTINGS


def resolve_log_dir(log_dir: str, base: Path | None = None) -> Path:
    path = Path(log_dir).expanduser()
    if path.is_absolute():
        return path
    return (base or Path.cwd()) / path


def setup_logging() -> None:
    log_dir = resolve_log_dir(SETTINGS.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "obligations.log"

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logging.basicConfig(
        level=SETTINGS.log_level.upper(),
        handlers=[file_handler, console_handler],
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
