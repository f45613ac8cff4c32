"""Tests for configuration settings."""
import logging

import pytest

from vocabot.config import LearningSettings, Settings, get_random_seed, settings
from vocabot.logging_config import setup_logging


def test_settings_defaults():
    """Test default learning settings values."""
    learning = LearningSettings()
    assert learning.initial_weight == 1.0
    assert learning.adjust_factor == 2.16
    assert learning.mastery_threshold == 0.1
    assert learning.max_import_words == 500


def test_global_settings_are_valid():
    """Test the global settings pass validation."""
    settings.validate()


@pytest.mark.parametrize(
    "learning, message",
    [
        (LearningSettings(adjust_factor=1.0), "ADJUST_FACTOR"),
        (LearningSettings(mastery_threshold=0.0), "MASTERY_THRESHOLD"),
        (LearningSettings(initial_weight=0.05, mastery_threshold=0.1), "INITIAL_WEIGHT"),
        (LearningSettings(max_import_words=0), "MAX_IMPORT_WORDS"),
    ],
)
def test_invalid_learning_settings(learning, message):
    """Test invalid learning settings are rejected."""
    with pytest.raises(ValueError, match=message):
        Settings(learning=learning).validate()


def test_validate_bot():
    """Test the bot token is required only for the bot."""
    test_settings = Settings()
    test_settings.bot.token = ""
    test_settings.validate()
    with pytest.raises(ValueError, match="TELEGRAM_BOT_TOKEN"):
        test_settings.validate_bot()

    test_settings.bot.token = "123456:test-token"
    test_settings.validate_bot()


def test_random_seed_from_env(monkeypatch):
    """Test the random seed can be set by environment variable."""
    monkeypatch.setenv("RANDOM_SEED", "42")
    assert get_random_seed() == 42
    assert LearningSettings().random_seed == 42

    monkeypatch.setenv("RANDOM_SEED", "")
    assert get_random_seed() is None


def test_setup_logging(tmp_path, monkeypatch):
    """Test logging writes to the console and to the log directory."""
    monkeypatch.setattr(settings.logging, "dir", str(tmp_path / "logs"))
    root_logger = logging.getLogger()
    previous_handlers = root_logger.handlers[:]
    previous_level = root_logger.level
    try:
        setup_logging("Testing", level="debug")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 2
        assert (tmp_path / "logs" / "vocabot.log").exists()
        assert logging.getLogger("telegram").level == logging.WARNING
    finally:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        for handler in previous_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(previous_level)
