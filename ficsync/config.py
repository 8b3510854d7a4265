# ficsync/config.py
import os
import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

# The archive's terms of use require at least five seconds between requests.
# Configuration may raise this value, never lower it.
MIN_REQUEST_INTERVAL = 5.0

DEFAULT_BASE_URL = "https://archiveofourown.org"
DEFAULT_USER_AGENT = "FicSync/1.0 (Personal Archive Reader)"
DEFAULT_DATABASE_URL = "sqlite:///ficsync.db"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default


@dataclass
class Settings:
    """Runtime settings, read from environment variables by `load_settings`."""
    database_url: str = DEFAULT_DATABASE_URL
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    min_request_interval: float = MIN_REQUEST_INTERVAL
    http_timeout: float = 30.0
    update_interval_hours: float = 6.0
    max_attempts: int = 3
    backoff_seconds: float = 10.0
    log_level: str = "INFO"
    max_workers: int = 4

    def __post_init__(self):
        if self.min_request_interval < MIN_REQUEST_INTERVAL:
            logger.warning(
                f"Request interval {self.min_request_interval}s is below the archive minimum, "
                f"using {MIN_REQUEST_INTERVAL}s"
            )
            self.min_request_interval = MIN_REQUEST_INTERVAL
        if self.max_attempts < 1:
            self.max_attempts = 1

    @property
    def update_interval_seconds(self) -> float:
        return self.update_interval_hours * 3600


def load_settings(database_url: Optional[str] = None) -> Settings:
    """Build settings from the environment.

    Args:
        database_url: Overrides DATABASE_URL when given

    Returns:
        A populated Settings instance
    """
    return Settings(
        database_url=database_url or os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        base_url=os.getenv("FICSYNC_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        user_agent=os.getenv("FICSYNC_USER_AGENT", DEFAULT_USER_AGENT),
        min_request_interval=_env_float("FICSYNC_MIN_REQUEST_INTERVAL", MIN_REQUEST_INTERVAL),
        http_timeout=_env_float("FICSYNC_HTTP_TIMEOUT", 30.0),
        update_interval_hours=_env_float("FICSYNC_UPDATE_INTERVAL_HOURS", 6.0),
        max_attempts=_env_int("FICSYNC_MAX_ATTEMPTS", 3),
        backoff_seconds=_env_float("FICSYNC_BACKOFF_SECONDS", 10.0),
        log_level=os.getenv("FICSYNC_LOG_LEVEL", "INFO").upper(),
        max_workers=_env_int("FICSYNC_MAX_WORKERS", 4),
    )
