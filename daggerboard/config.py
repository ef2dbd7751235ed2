"""Configuration management for Daggerboard."""

import os
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env file
def _find_env_file() -> Path | None:
    """Find the .env file, searching up the directory tree."""
    current = Path(__file__).parent
    for _ in range(5):  # Search up to 5 levels
        env_path = current / ".env"
        if env_path.exists():
            return env_path
        current = current.parent
    return None


_env_file = _find_env_file()
if _env_file:
    load_dotenv(_env_file)


class Config:
    """Application configuration from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./daggerboard.db")

    # Pre-database key/value store, imported once on first start
    LEGACY_STORE_PATH: str = os.getenv("LEGACY_STORE_PATH", "store.json")

    # Seconds to wait for the state lock before failing the command
    LOCK_TIMEOUT: float = float(os.getenv("LOCK_TIMEOUT", "5.0"))

    # Default number of dice rolls returned by history queries
    DICE_HISTORY_LIMIT: int = int(os.getenv("DICE_HISTORY_LIMIT", "100"))

    # Logging / debug
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def validate(cls) -> list[str]:
        """Validate configuration, return list of issues."""
        issues = []

        if cls.LOCK_TIMEOUT <= 0:
            issues.append(f"LOCK_TIMEOUT must be positive (got {cls.LOCK_TIMEOUT})")
        if cls.DICE_HISTORY_LIMIT < 1:
            issues.append(f"DICE_HISTORY_LIMIT must be at least 1 (got {cls.DICE_HISTORY_LIMIT})")

        return issues


# Convenience access
config = Config()
