"""Configuration settings for the bot."""
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

# Learning settings
INITIAL_WEIGHT = 1.0
ADJUST_FACTOR = 2.16  # weight multiplier for "unknown", divisor for "known"
MASTERY_THRESHOLD = 0.1  # words below this weight are no longer shown


def get_random_seed() -> Optional[int]:
    """Get the random seed from environment variable."""
    seed = os.getenv("RANDOM_SEED", "")
    return int(seed) if seed else None


@dataclass
class LearningSettings:
    """Learning process settings."""
    initial_weight: float = float(os.getenv("INITIAL_WEIGHT", str(INITIAL_WEIGHT)))
    adjust_factor: float = float(os.getenv("ADJUST_FACTOR", str(ADJUST_FACTOR)))
    mastery_threshold: float = float(os.getenv("MASTERY_THRESHOLD", str(MASTERY_THRESHOLD)))
    random_seed: Optional[int] = field(default_factory=get_random_seed)
    max_import_words: int = int(os.getenv("MAX_IMPORT_WORDS", "500"))


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
class BotSettings:
    """Bot configuration settings."""
    token: str = os.getenv("TELEGRAM_BOT_TOKEN", "")


@dataclass
class MonitoringSettings:
    """Prometheus metrics settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9090"))


def get_learning_settings() -> LearningSettings:
    """Get learning settings."""
    return LearningSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_bot_settings() -> BotSettings:
    """Get bot settings."""
    return BotSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    learning: LearningSettings = field(default_factory=get_learning_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    bot: BotSettings = field(default_factory=get_bot_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.learning.adjust_factor <= 1:
            raise ValueError("ADJUST_FACTOR must be greater than 1")

        if self.learning.mastery_threshold <= 0:
            raise ValueError("MASTERY_THRESHOLD must be positive")

        if self.learning.initial_weight < self.learning.mastery_threshold:
            raise ValueError("INITIAL_WEIGHT cannot be lower than MASTERY_THRESHOLD")

        if self.learning.max_import_words < 1:
            raise ValueError("MAX_IMPORT_WORDS must be positive")

    def validate_bot(self) -> None:
        """Validate settings needed to run the Telegram bot."""
        if not self.bot.token:
            raise ValueError("TELEGRAM_BOT_TOKEN is required")


# Create global settings instance
settings = Settings()
settings.validate()
