from unittest.mock import patch

import structlog

from crewplan.platform.config import Settings, get_settings
from crewplan.platform.logging import configure_logging, get_logger, log_context


def test_scheduling_defaults():
    config = Settings(_env_file=None)

    assert config.WEEK_STARTS_ON == 0
    assert config.MIN_BOOKING_DURATION_DAYS == 1
    assert config.UNASSIGNED_TEAM_ID == "unassigned"
    assert (config.DEFAULT_START_HOUR, config.DEFAULT_END_HOUR) == (8, 17)
    assert config.MAX_RESOLUTION_ROUNDS == 5
    assert config.AUTO_ASSIGN_SKIP_WEEKENDS is False


def test_env_overrides():
    with patch.dict("os.environ", {"MAX_RESOLUTION_ROUNDS": "2", "AUTO_ASSIGN_SKIP_WEEKENDS": "true"}):
        config = Settings(_env_file=None)

    assert config.MAX_RESOLUTION_ROUNDS == 2
    assert config.AUTO_ASSIGN_SKIP_WEEKENDS is True


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_configure_logging():
    configure_logging()

    logger = get_logger("crewplan.test")
    assert logger is not None
    assert structlog.is_configured()


def test_log_context_binds_and_unbinds():
    with log_context(team_id="team_blue"):
        assert structlog.contextvars.get_contextvars()["team_id"] == "team_blue"

    assert "team_id" not in structlog.contextvars.get_contextvars()


def test_unused_debug_flag_removed():
    assert "DEBUG" not in Settings.model_fields
