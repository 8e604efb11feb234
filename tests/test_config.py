"""
Tests for configuration management and environment variable handling
"""

import logging
import os
import pytest
from unittest.mock import patch
from pydantic import ValidationError

from app.core.config import Settings, Environment, LogLevel, get_settings


class TestSettings:
    """Test Settings class validation and functionality"""

    def test_default_settings(self):
        """Test default settings values"""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

            assert settings.API_TITLE == "Roomy Listing Parser API"
            assert settings.API_VERSION == "1.0.0"
            assert settings.CORS_ORIGINS == ["*"]
            assert settings.FETCH_TIMEOUT == 10.0
            assert settings.RATE_LIMIT_PER_MINUTE == 10
            assert settings.RATE_LIMIT_WINDOW_SECONDS == 60
            assert settings.MAX_URL_LENGTH == 2000
            assert settings.LOG_LEVEL == LogLevel.INFO
            assert settings.ENVIRONMENT == Environment.DEVELOPMENT

    def test_environment_variable_override(self):
        """Test that environment variables override defaults"""
        env_vars = {
            "API_TITLE": "Custom API Title",
            "FETCH_TIMEOUT": "5",
            "RATE_LIMIT_PER_MINUTE": "30",
            "RATE_LIMIT_WINDOW_SECONDS": "120",
            "MAX_URL_LENGTH": "4000",
            "LOG_LEVEL": "DEBUG",
            "ENVIRONMENT": "staging",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            settings = Settings(_env_file=None)

            assert settings.API_TITLE == "Custom API Title"
            assert settings.FETCH_TIMEOUT == 5.0
            assert settings.RATE_LIMIT_PER_MINUTE == 30
            assert settings.RATE_LIMIT_WINDOW_SECONDS == 120
            assert settings.MAX_URL_LENGTH == 4000
            assert settings.LOG_LEVEL == LogLevel.DEBUG
            assert settings.ENVIRONMENT == Environment.STAGING

    def test_cors_origins_parsing(self):
        """Comma-separated origins become a list"""
        env_vars = {"CORS_ORIGINS": "https://roomy.app, https://admin.roomy.app,,"}

        with patch.dict(os.environ, env_vars, clear=True):
            settings = Settings(_env_file=None)

            assert settings.CORS_ORIGINS == ["https://roomy.app", "https://admin.roomy.app"]

    def test_log_level_is_case_insensitive(self):
        """Lower-case log levels are normalized"""
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}, clear=True):
            settings = Settings(_env_file=None)

            assert settings.LOG_LEVEL == LogLevel.WARNING

    def test_invalid_log_level(self):
        """Unknown log levels are rejected"""
        with patch.dict(os.environ, {"LOG_LEVEL": "VERBOSE"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_invalid_environment(self):
        """Unknown environments are rejected"""
        with patch.dict(os.environ, {"ENVIRONMENT": "qa"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    @pytest.mark.parametrize("name,value", [
        ("FETCH_TIMEOUT", "0"),
        ("FETCH_TIMEOUT", "61"),
        ("RATE_LIMIT_PER_MINUTE", "0"),
        ("RATE_LIMIT_WINDOW_SECONDS", "0"),
        ("MAX_URL_LENGTH", "50"),
        ("MAX_URL_LENGTH", "not-a-number"),
    ])
    def test_out_of_range_values(self, name, value):
        """Numeric settings are bounded"""
        with patch.dict(os.environ, {name: value}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_production_warnings(self, caplog):
        """Wildcard CORS and DEBUG logging are flagged in production"""
        env_vars = {"ENVIRONMENT": "production", "LOG_LEVEL": "DEBUG"}

        with patch.dict(os.environ, env_vars, clear=True):
            with caplog.at_level(logging.WARNING):
                Settings(_env_file=None)

        assert "wildcard CORS origins" in caplog.text
        assert "DEBUG log level" in caplog.text

    def test_no_warnings_outside_production(self, caplog):
        """Development defaults are quiet"""
        with patch.dict(os.environ, {}, clear=True):
            with caplog.at_level(logging.WARNING):
                Settings(_env_file=None)

        assert caplog.text == ""


class TestEnvironmentConfig:
    """Test derived configuration helpers"""

    def test_development_config(self):
        """Docs enabled and configured log level used"""
        with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}, clear=True):
            config = Settings(_env_file=None).get_environment_config()

            assert config["environment"] == Environment.DEVELOPMENT
            assert config["debug"] is True
            assert config["enable_docs"] is True
            assert config["log_level"] == LogLevel.DEBUG

    def test_production_config(self):
        """Docs disabled and INFO logging forced"""
        env_vars = {"ENVIRONMENT": "production", "CORS_ORIGINS": "https://roomy.app"}

        with patch.dict(os.environ, env_vars, clear=True):
            config = Settings(_env_file=None).get_environment_config()

            assert config["debug"] is False
            assert config["enable_docs"] is False
            assert config["log_level"] == "INFO"

    def test_rate_limit_config(self):
        """Rate limiter keyword arguments"""
        env_vars = {"RATE_LIMIT_PER_MINUTE": "5", "RATE_LIMIT_WINDOW_SECONDS": "30"}

        with patch.dict(os.environ, env_vars, clear=True):
            config = Settings(_env_file=None).get_rate_limit_config()

            assert config == {"max_requests": 5, "window_seconds": 30}

    def test_get_settings_returns_new_instance(self):
        """get_settings() reads the environment each time"""
        with patch.dict(os.environ, {}, clear=True):
            assert get_settings() is not get_settings()
