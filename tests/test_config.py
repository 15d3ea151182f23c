"""Tests for settings and logging setup."""

import logging

from catcher_coach.config import Settings, get_settings
from catcher_coach.models.skills import SkillsConfig
from catcher_coach.utils.log_sanitizer import get_sanitization_filter
from catcher_coach.utils.logs import PACKAGE_LOGGER, configure_logging


class TestSettings:
    def test_defaults(self, settings):
        assert settings.neutral_score == 5
        assert settings.default_duration_minutes == 30
        assert settings.uniform_score_threshold == 9
        assert settings.sanitize_logs is True

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("CATCHER_COACH_DEFAULT_DURATION_MINUTES", "45")
        monkeypatch.setenv("CATCHER_COACH_UNIFORM_SCORE_THRESHOLD", "10")
        settings = Settings(_env_file=None)
        assert settings.default_duration_minutes == 45
        assert SkillsConfig.from_settings(settings).uniform_score_threshold == 10

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestConfigureLogging:
    def test_single_handler(self, settings):
        configure_logging(settings)
        logger = configure_logging(settings)
        assert logger.name == PACKAGE_LOGGER
        owned = [h for h in logger.handlers if getattr(h, "_catcher_coach", False)]
        assert len(owned) == 1
        assert logger.level == logging.INFO

    def test_installs_sanitizer(self, settings):
        logger = configure_logging(settings)
        assert get_sanitization_filter() in logger.filters
