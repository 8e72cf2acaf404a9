"""Tests for settings and logging setup."""

import logging

import pytest
from pydantic import ValidationError

from llc_governance.config import GovernanceSettings, get_settings
from llc_governance.logging_config import LOG_FORMAT, get_logger, setup_logging
from llc_governance.schemas import RosterPolicy


class TestGovernanceSettings:

    def test_defaults(self):
        settings = GovernanceSettings(_env_file=None)
        assert settings.log_level == "INFO"
        assert not settings.enforce_board_size
        assert not settings.strict_supervisor_segregation

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LLC_GOVERNANCE_LOG_LEVEL", "debug")
        monkeypatch.setenv("LLC_GOVERNANCE_REQUIRE_BOARD_CHAIRPERSON", "true")
        get_settings.cache_clear()

        settings = get_settings()
        assert settings.log_level == "DEBUG"
        assert settings.require_board_chairperson
        assert get_settings() is settings

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            GovernanceSettings(_env_file=None, log_level="LOUD")

    def test_policy_from_settings(self):
        settings = GovernanceSettings(_env_file=None, distinct_management=True)
        policy = RosterPolicy.from_settings(settings)
        assert policy == RosterPolicy(distinct_management=True)

    def test_default_policy_from_cached_settings(self):
        assert RosterPolicy.from_settings() == RosterPolicy()


class TestLogging:

    @pytest.fixture
    def package_logger(self):
        logger = logging.getLogger("llc_governance")
        handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
        yield logger
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate

    def test_setup_installs_one_handler(self, package_logger):
        setup_logging("warning")
        logger = setup_logging("warning")

        assert logger is package_logger
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert logger.handlers[0].formatter._fmt == LOG_FORMAT
        assert logger.propagate is False

    def test_setup_uses_settings_level(self, package_logger, monkeypatch):
        monkeypatch.setenv("LLC_GOVERNANCE_LOG_LEVEL", "ERROR")
        get_settings.cache_clear()
        assert setup_logging().level == logging.ERROR

    def test_module_loggers_are_children(self):
        assert get_logger("llc_governance.differ").parent.name == "llc_governance"
