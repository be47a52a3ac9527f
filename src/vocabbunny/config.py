"""Configuration settings for the application."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
MEDIA_DIR = DATA_DIR / "media"
PRONUNCIATIONS_DIR = MEDIA_DIR / "pronunciations"

# Learning settings
DEFAULT_DAILY_GOAL = 5
SMART_POOL_SIZE = 5  # least-quizzed words considered by smart mode
DEFAULT_THEME = "General"


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
        MEDIA_DIR,
        PRONUNCIATIONS_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR
    media_dir: Path = MEDIA_DIR
    pronunciations_dir: Path = PRONUNCIATIONS_DIR


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///vocabbunny.db")
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
    """Quiz and daily goal settings."""
    default_daily_goal: int = int(os.getenv("DEFAULT_DAILY_GOAL", str(DEFAULT_DAILY_GOAL)))
    smart_pool_size: int = int(os.getenv("SMART_POOL_SIZE", str(SMART_POOL_SIZE)))
    default_theme: str = os.getenv("DEFAULT_THEME", DEFAULT_THEME)


@dataclass
class EnrichmentSettings:
    """Word enrichment settings."""
    target_language: str = os.getenv("TARGET_LANGUAGE", "en")
    native_language: str = os.getenv("NATIVE_LANGUAGE", "vi")
    max_examples: int = int(os.getenv("MAX_EXAMPLES", "2"))


@dataclass
class SpeakingSettings:
    """Speaking practice settings."""
    min_transcript_ratio: float = float(os.getenv("MIN_TRANSCRIPT_RATIO", "0.7"))


@dataclass
class MonitoringSettings:
    """Prometheus exporter settings."""
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


def get_enrichment_settings() -> EnrichmentSettings:
    """Get enrichment settings."""
    return EnrichmentSettings()


def get_speaking_settings() -> SpeakingSettings:
    """Get speaking settings."""
    return SpeakingSettings()


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
    enrichment: EnrichmentSettings = field(default_factory=get_enrichment_settings)
    speaking: SpeakingSettings = field(default_factory=get_speaking_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.learning.default_daily_goal < 1:
            raise ValueError("DEFAULT_DAILY_GOAL must be positive")

        if self.learning.smart_pool_size < 1:
            raise ValueError("SMART_POOL_SIZE must be positive")

        if not self.learning.default_theme.strip():
            raise ValueError("DEFAULT_THEME cannot be empty")

        if self.enrichment.max_examples < 1:
            raise ValueError("MAX_EXAMPLES must be positive")

        if self.speaking.min_transcript_ratio < 0 or self.speaking.min_transcript_ratio > 1:
            raise ValueError("MIN_TRANSCRIPT_RATIO must be between 0 and 1")


# Create global settings instance
settings = Settings()
settings.validate()
