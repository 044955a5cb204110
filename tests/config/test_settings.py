"""Tests for scheduler settings and logger setup."""

import json

import pytest
from loguru import logger
from pydantic import ValidationError

from coach_scheduler.config.settings import SchedulerSettings
from coach_scheduler.core.logger import setup_logger


class TestSchedulerSettings:
    """Tests for environment-driven scheduler settings."""

    def test_defaults(self, monkeypatch):
        """Unset variables give the documented defaults."""
        for name in ("WORKING_DAY_START_HOUR", "WORKING_DAY_END_HOUR", "SLOT_STEP_MINUTES", "WEEKLY_OCCURRENCES"):
            monkeypatch.delenv(name, raising=False)
        config = SchedulerSettings(_env_file=None)
        assert config.working_day_start_hour == 6
        assert config.working_day_end_hour == 22
        assert config.slot_step_minutes == 30
        assert config.weekly_occurrences == 4

    def test_environment_overrides(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv("WEEKLY_OCCURRENCES", "6")
        monkeypatch.setenv("SLOT_STEP_MINUTES", "15")
        config = SchedulerSettings(_env_file=None)
        assert config.weekly_occurrences == 6
        assert config.slot_step_minutes == 15

    def test_invalid_log_level_falls_back_to_info(self, monkeypatch):
        """Unknown log levels fall back to INFO."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert SchedulerSettings(_env_file=None).log_level == "INFO"

    def test_empty_working_day_rejected(self):
        """Start hour must be before end hour."""
        with pytest.raises(ValidationError, match="WORKING_DAY_START_HOUR"):
            SchedulerSettings(_env_file=None, working_day_start_hour=20, working_day_end_hour=8)

    def test_meeting_link_base_url_trailing_slash_removed(self, monkeypatch):
        """Trailing slash is stripped from the link base URL."""
        monkeypatch.setenv("MEETING_LINK_BASE_URL", "https://meet.example/")
        assert SchedulerSettings(_env_file=None).meeting_link_base_url == "https://meet.example"



def test_setup_logger_writes_file(tmp_path):
    """A file sink receives engine log lines."""
    log_file = tmp_path / "logs" / "scheduler.log"
    setup_logger(level="DEBUG", log_file=str(log_file))
    logger.debug("slot search started")
    logger.complete()
    assert "slot search started" in log_file.read_text()
    setup_logger(level="INFO")


def test_setup_logger_json_file(tmp_path):
    """With json_file, every file record is one JSON object."""
    log_file = tmp_path / "scheduler.jsonl"
    setup_logger(level="INFO", log_file=str(log_file), json_file=True)
    logger.info("resolved batch")
    logger.complete()

    records = [json.loads(line) for line in log_file.read_text().splitlines() if line]
    assert any(r["record"]["message"] == "resolved batch" for r in records)
    setup_logger(level="INFO")


def test_setup_logger_from_settings_uses_log_settings(monkeypatch):
    """LOG_LEVEL, LOG_FILE and LOG_JSON reach setup_logger."""
    import coach_scheduler.core.logger as logger_module
    from coach_scheduler.config.settings import settings

    calls = []
    monkeypatch.setattr(settings, "log_level", "WARNING")
    monkeypatch.setattr(settings, "log_file", "/var/log/scheduler.log")
    monkeypatch.setattr(settings, "log_json", True)
    monkeypatch.setattr(logger_module, "setup_logger", lambda **kwargs: calls.append(kwargs))

    logger_module.setup_logger_from_settings()

    assert calls == [{"level": "WARNING", "log_file": "/var/log/scheduler.log", "json_file": True}]


def test_explicit_log_file_overrides_setting(monkeypatch):
    """A log_file argument wins over LOG_FILE."""
    import coach_scheduler.core.logger as logger_module
    from coach_scheduler.config.settings import settings

    calls = []
    monkeypatch.setattr(settings, "log_file", "/var/log/scheduler.log")
    monkeypatch.setattr(logger_module, "setup_logger", lambda **kwargs: calls.append(kwargs))

    logger_module.setup_logger_from_settings(log_file="/tmp/override.log")

    assert calls[0]["log_file"] == "/tmp/override.log"
