"""Configuration settings for the trainer."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent
PACKAGE_DIR = Path(__file__).parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
PROGRESS_FILE = DATA_DIR / "progress.json"
DEFAULT_CATALOG_FILE = PACKAGE_DIR / "data" / "vocabulary.json"

# Scheduling settings
REVIEW_INTERVALS_HOURS = [4, 8, 24, 72, 168]  # hours until next review, indexed by streak
MASTERED_STREAK = 5
QUEUE_CAP = 20  # max items in a daily queue
NEW_WORDS_PER_DAY = 10

PROGRESS_BACKENDS = ("json", "database", "memory")


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR
    progress_file: Path = PROGRESS_FILE
    catalog_file: Path = Path(os.getenv("CATALOG_FILE", str(DEFAULT_CATALOG_FILE)))


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///miyalingo.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class LearningSettings:
    """Learning process settings."""
    new_words_per_day: int = int(os.getenv("NEW_WORDS_PER_DAY", str(NEW_WORDS_PER_DAY)))
    queue_cap: int = QUEUE_CAP
    mastered_streak: int = MASTERED_STREAK
    review_intervals_hours: list[int] = field(default_factory=lambda: list(REVIEW_INTERVALS_HOURS))


@dataclass
class StorageSettings:
    """Progress storage settings."""
    backend: str = os.getenv("PROGRESS_BACKEND", "json").lower()


@dataclass
class MonitoringSettings:
    """Prometheus metrics settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9090"))


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_learning_settings() -> LearningSettings:
    """Get learning settings."""
    return LearningSettings()


def get_storage_settings() -> StorageSettings:
    """Get storage settings."""
    return StorageSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    learning: LearningSettings = field(default_factory=get_learning_settings)
    storage: StorageSettings = field(default_factory=get_storage_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.learning.new_words_per_day < 0:
            raise ValueError("NEW_WORDS_PER_DAY cannot be negative")

        if self.learning.queue_cap < 1:
            raise ValueError("Queue cap must be positive")

        if not self.learning.review_intervals_hours:
            raise ValueError("Review intervals cannot be empty")

        intervals = self.learning.review_intervals_hours
        if any(a >= b for a, b in zip(intervals, intervals[1:])):
            raise ValueError("Review intervals must be strictly increasing")

        if self.storage.backend not in PROGRESS_BACKENDS:
            raise ValueError(
                f"PROGRESS_BACKEND must be one of {', '.join(PROGRESS_BACKENDS)}"
            )


# Create global settings instance
settings = Settings()
settings.validate()
