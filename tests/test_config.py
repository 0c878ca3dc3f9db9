"""Tests for settings and logging setup."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from transitlink.config import TransitlinkSettings, get_settings
from transitlink.logging import get_logger, set_global_log_level


class TestSettings:
    """Tests for TransitlinkSettings."""

    def test_defaults(self, monkeypatch):
        for name in ("TOPOLOGY_FILE", "LOG_LEVEL", "MAX_WORKERS", "CHECK_OVERLAPS"):
            monkeypatch.delenv(f"TRANSITLINK_{name}", raising=False)

        settings = TransitlinkSettings(_env_file=None)

        assert settings.topology_file == Path("examples/topology.yml")
        assert settings.log_level == "WARNING"
        assert settings.max_workers == 1
        assert settings.check_overlaps is False

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("TRANSITLINK_LOG_LEVEL", "debug")
        monkeypatch.setenv("TRANSITLINK_MAX_WORKERS", "8")
        monkeypatch.setenv("TRANSITLINK_CHECK_OVERLAPS", "true")

        settings = get_settings()

        assert settings.log_level == "DEBUG"
        assert settings.max_workers == 8
        assert settings.check_overlaps is True

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            TransitlinkSettings(log_level="chatty")

    def test_invalid_workers(self):
        with pytest.raises(ValidationError):
            TransitlinkSettings(max_workers=0)


class TestLogging:
    """Tests for logging helpers."""

    def test_get_logger(self):
        assert get_logger("transitlink.core.planner").name == "transitlink.core.planner"

    def test_set_level_from_name(self):
        set_global_log_level("info")
        assert logging.getLogger("transitlink").level == logging.INFO

        set_global_log_level(logging.WARNING)
        assert logging.getLogger("transitlink").level == logging.WARNING
