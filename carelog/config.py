"""
Configuration management with environment variable support and validation.

Settings come from the process environment, optionally seeded from a
``.env`` file. Values are validated by pydantic at load time so a bad
threshold or path fails on startup rather than on first use.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Environment = Literal["development", "staging", "production"]


class StorageConfig(BaseModel):
    """Location of the local SQLite database."""

    db_path: Path = Field(
        default=Path("./babyRecords.db"), description="SQLite file holding both event logs"
    )


class AggregationConfig(BaseModel):
    """Sizes of the derived read views."""

    recent_limit: int = Field(
        default=5, gt=0, description="Events of each kind shown on the home screen"
    )
    history_limit: int = Field(
        default=100, gt=0, description="Maximum rows returned by the merged history"
    )


class RecencyConfig(BaseModel):
    """Hour thresholds used to flag a feeding as due."""

    approaching_hours: float = Field(
        default=3.0, gt=0.0, description="From this many hours on, a feeding is approaching"
    )
    feed_now_hours: float = Field(
        default=4.0, gt=0.0, description="From this many hours on, the baby should be fed"
    )

    @model_validator(mode="after")
    def approaching_before_feed_now(self) -> "RecencyConfig":
        if self.approaching_hours >= self.feed_now_hours:
            raise ValueError("approaching_hours must be lower than feed_now_hours")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="INFO", description="Logging level")
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Environment = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Enable debug mode")

    storage: StorageConfig = Field(default_factory=StorageConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    recency: RecencyConfig = Field(default_factory=RecencyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Environment:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> LogLevel:
        v = val.strip().upper()
        return cast(
            LogLevel,
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    storage_config = StorageConfig(
        db_path=Path(os.getenv("CARELOG_DB_PATH", "./babyRecords.db")),
    )

    aggregation_config = AggregationConfig(
        recent_limit=int(os.getenv("CARELOG_RECENT_LIMIT", "5")),
        history_limit=int(os.getenv("CARELOG_HISTORY_LIMIT", "100")),
    )

    recency_config = RecencyConfig(
        approaching_hours=float(os.getenv("FEED_APPROACHING_HOURS", "3")),
        feed_now_hours=float(os.getenv("FEED_NOW_HOURS", "4")),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        storage=storage_config,
        aggregation=aggregation_config,
        recency=recency_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()
