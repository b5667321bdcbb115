"""
Runtime settings for JobBoard.

Settings are read from environment variables (optionally seeded from a
.env file by env.load_env).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_DB_PATH = "data/jobboard.db"
DEFAULT_RECOMMENDATION_LIMIT = 3
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIR = "logs"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Resolved configuration values."""
    db_path: Path
    storage_url: Optional[str]
    storage_key: Optional[str]
    recommendation_limit: int
    log_level: str
    log_dir: Path


def _parse_limit(raw: Optional[str]) -> int:
    if raw is None or raw.strip() == "":
        return DEFAULT_RECOMMENDATION_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        raise ValueError(f"RECOMMENDATION_LIMIT must be an integer, got {raw!r}") from None
    if limit < 1:
        raise ValueError(f"RECOMMENDATION_LIMIT must be at least 1, got {limit}")
    return limit


def _parse_log_level(raw: Optional[str]) -> str:
    level = (raw or DEFAULT_LOG_LEVEL).strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {raw!r}")
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        Settings instance

    Raises:
        ValueError: If RECOMMENDATION_LIMIT is not a positive integer or
            LOG_LEVEL is not a known level
    """
    env = os.environ if environ is None else environ

    storage_url = env.get("STORAGE_URL") or None
    if storage_url:
        storage_url = storage_url.rstrip("/")

    return Settings(
        db_path=Path(env.get("JOBBOARD_DB_PATH") or DEFAULT_DB_PATH),
        storage_url=storage_url,
        storage_key=env.get("STORAGE_KEY") or None,
        recommendation_limit=_parse_limit(env.get("RECOMMENDATION_LIMIT")),
        log_level=_parse_log_level(env.get("LOG_LEVEL")),
        log_dir=Path(env.get("LOG_DIR") or DEFAULT_LOG_DIR),
    )
