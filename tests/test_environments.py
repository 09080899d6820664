"""
Test environment-specific configurations
"""

import os
import pytest
from infrastructure.config.environments import get_environment_config
from infrastructure.config.environments.development import get_development_config
from infrastructure.config.environments.production import get_production_config


class TestEnvironmentConfigs:
    """Test environment-specific configuration loading"""

    def test_development_config(self, monkeypatch):
        """Test development configuration"""
        monkeypatch.delenv("ECOFINDS_DB_PATH", raising=False)
        config = get_development_config()

        assert config.environment == "development"
        assert config.debug == True
        assert config.logging.level == "DEBUG"
        assert "DEV" in config.ui.app_title
        assert config.ui.show_dev_inbox == True
        assert config.auth.require_email_verification == False
        assert config.notification.simulated_delay_seconds == 0.0
        assert config.storage.db_path == "data/ecofinds-dev.db"

    def test_development_keeps_explicit_db_path(self, monkeypatch):
        monkeypatch.setenv("ECOFINDS_DB_PATH", "/tmp/custom.db")
        config = get_development_config()

        assert config.storage.db_path == "/tmp/custom.db"

    def test_production_config(self):
        """Test production configuration"""
        config = get_production_config()

        assert config.environment == "production"
        assert config.debug == False
        assert config.logging.level == "INFO"
        assert "DEV" not in config.ui.app_title
        assert config.ui.show_dev_inbox == False
        assert config.auth.require_email_verification == True
        assert config.auth.bcrypt_rounds == 12
        assert config.catalog.seed_sample_data == False

    def test_environment_selection_development(self):
        """Test environment selection for development"""
        original_env = os.environ.get("APP_ENV")
        try:
            os.environ["APP_ENV"] = "development"
            config = get_environment_config()
            assert config.environment == "development"
            assert config.debug == True
        finally:
            if original_env is not None:
                os.environ["APP_ENV"] = original_env
            else:
                os.environ.pop("APP_ENV", None)

    def test_environment_selection_production(self):
        """Test environment selection for production"""
        original_env = os.environ.get("APP_ENV")
        try:
            os.environ["APP_ENV"] = "production"
            config = get_environment_config()
            assert config.environment == "production"
            assert config.debug == False
        finally:
            if original_env is not None:
                os.environ["APP_ENV"] = original_env
            else:
                os.environ.pop("APP_ENV", None)

    def test_default_environment(self):
        """Test default environment when APP_ENV is not set"""
        original_env = os.environ.get("APP_ENV")
        try:
            os.environ.pop("APP_ENV", None)
            config = get_environment_config()
            # Should default to development
            assert config.environment == "development"
        finally:
            if original_env is not None:
                os.environ["APP_ENV"] = original_env

    def test_config_validation(self, tmp_path):
        """Test that all environment configs pass validation"""
        configs = [
            get_development_config(),
            get_production_config()
        ]

        for config in configs:
            config.storage.db_path = str(tmp_path / "profile" / "ecofinds.db")
            config.logging.log_file = str(tmp_path / "logs" / "app.log")
            assert config.validate() == []
