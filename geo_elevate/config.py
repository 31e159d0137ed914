"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv

from geo_elevate.exceptions import ConfigurationError

load_dotenv()

# Database
DATABASE_PATH: Path = Path(os.getenv("DATABASE_PATH", "./data/geoelevate.db"))
SQLITE_TIMEOUT: float = float(os.getenv("SQLITE_TIMEOUT", "5.0"))

# Progression
# Max XP a user can earn per game type per UTC day (encourages variety)
DAILY_XP_CAP: int = int(os.getenv("DAILY_XP_CAP", "500"))
XP_PER_LEVEL: int = int(os.getenv("XP_PER_LEVEL", "1000"))

# A conflicting write is retried this many times before surfacing ConflictError
CONFLICT_MAX_RETRIES: int = int(os.getenv("CONFLICT_MAX_RETRIES", "1"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


def validate_config() -> None:
    """Validate required configuration"""
    if not str(DATABASE_PATH):
        raise ConfigurationError("DATABASE_PATH is required", config_key="DATABASE_PATH")
    if DAILY_XP_CAP < 0:
        raise ConfigurationError("DAILY_XP_CAP must be non-negative", config_key="DAILY_XP_CAP")
    if XP_PER_LEVEL <= 0:
        raise ConfigurationError("XP_PER_LEVEL must be positive", config_key="XP_PER_LEVEL")
    if CONFLICT_MAX_RETRIES < 0:
        raise ConfigurationError(
            "CONFLICT_MAX_RETRIES must be non-negative", config_key="CONFLICT_MAX_RETRIES"
        )
    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"Unknown LOG_LEVEL '{LOG_LEVEL}'", config_key="LOG_LEVEL")
