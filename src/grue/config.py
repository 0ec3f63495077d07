"""Configuration for Grue."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Config:
    """Application configuration."""

    database_url: str = "sqlite:///./grue.db"
    player: str = "adventurer"
    data_dir: Path | None = None
    max_weight: int = 100
    log_level: str = "WARNING"
    log_file: Path | None = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        data_dir = os.getenv("GRUE_DATA_DIR")
        log_file = os.getenv("GRUE_LOG_FILE")

        return cls(
            database_url=os.getenv("GRUE_DATABASE_URL", cls.database_url),
            player=os.getenv("GRUE_PLAYER", cls.player),
            data_dir=Path(data_dir) if data_dir else None,
            max_weight=int(os.getenv("GRUE_MAX_WEIGHT", str(cls.max_weight))),
            log_level=os.getenv("GRUE_LOG_LEVEL", cls.log_level),
            log_file=Path(log_file) if log_file else None,
            json_logs=os.getenv("GRUE_JSON_LOGS", "").lower()
            in ("true", "1", "yes"),
        )
