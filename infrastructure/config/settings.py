"""
Unified Configuration System for EcoFinds

This module provides a centralized configuration system that consolidates all application settings,
supports environment-based overrides, and provides type-safe configuration access.
"""

from dataclasses import dataclass, field
from typing import Optional, List
import streamlit as st
import os
from pathlib import Path


@dataclass
class StorageKeys:
    """Key names of the persisted records"""
    users: str = "ecofinds_users"
    session_user: str = "ecofinds_user"
    products: str = "ecofinds_products"
    cart: str = "ecofinds_cart"
    purchases: str = "ecofinds_purchases"


@dataclass
class StorageConfig:
    """Key-value storage configuration"""
    backend: str = "sqlite"  # sqlite, memory
    db_path: str = "data/ecofinds.db"
    keys: StorageKeys = field(default_factory=StorageKeys)


@dataclass
class AuthConfig:
    """Authentication and user management configuration"""
    bcrypt_rounds: int = 12
    verification_token_ttl_hours: int = 24
    password_min_length: int = 8
    display_name_min_length: int = 2
    require_email_verification: bool = False
    verification_base_url: str = "http://localhost:8501"

    @classmethod
    def from_secrets(cls) -> 'AuthConfig':
        """Load auth config, reading the public base URL from Streamlit secrets"""
        default_url = cls.verification_base_url

        # In test environment, prefer environment variables
        if os.getenv("PYTEST_CURRENT_TEST") is not None:
            return cls(verification_base_url=os.getenv("ECOFINDS_BASE_URL", default_url))

        try:
            return cls(verification_base_url=st.secrets.get("ECOFINDS_BASE_URL", default_url))
        except Exception:
            # Fallback to environment variables if secrets not available
            return cls(verification_base_url=os.getenv("ECOFINDS_BASE_URL", default_url))


@dataclass
class NotificationConfig:
    """Verification email delivery configuration"""
    simulated_delay_seconds: float = 1.0
    sender_address: str = "no-reply@ecofinds.local"
    subject: str = "Verify your EcoFinds account"


@dataclass
class CatalogConfig:
    """Product catalog configuration"""
    seed_sample_data: bool = True
    currency: str = "USD"


@dataclass
class UIConfig:
    """User interface configuration"""
    app_title: str = "EcoFinds"
    tagline: str = "Sustainable second-hand marketplace"
    page_icon: str = "🌱"
    show_dev_inbox: bool = True


@dataclass
class LoggingConfig:
    """Logging and monitoring configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = True
    log_file: str = "logs/app.log"


@dataclass
class AppConfig:
    """Main application configuration"""
    storage: StorageConfig = field(default_factory=StorageConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    notification: NotificationConfig = field(default_factory=NotificationConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Environment settings
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def load(cls) -> 'AppConfig':
        """Load configuration with environment overrides"""
        config = cls()

        config.auth = AuthConfig.from_secrets()

        backend = os.getenv("ECOFINDS_STORAGE_BACKEND")
        if backend:
            config.storage.backend = backend
        db_path = os.getenv("ECOFINDS_DB_PATH")
        if db_path:
            config.storage.db_path = db_path

        # Apply environment-specific overrides
        if config.environment == "production":
            config.debug = False
            config.logging.level = "WARNING"
        elif config.environment == "development":
            config.debug = True
            config.logging.level = "DEBUG"

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if self.storage.backend not in ("sqlite", "memory"):
            errors.append(f"Unknown storage backend: {self.storage.backend}")

        # bcrypt accepts 4..31 rounds
        if not 4 <= self.auth.bcrypt_rounds <= 31:
            errors.append("bcrypt_rounds must be between 4 and 31")

        if self.auth.verification_token_ttl_hours <= 0:
            errors.append("verification_token_ttl_hours must be positive")

        # Check file paths exist
        if self.storage.backend == "sqlite":
            Path(self.storage.db_path).parent.mkdir(parents=True, exist_ok=True)

        if self.logging.enable_file_logging:
            log_dir = Path(self.logging.log_file).parent
            if not log_dir.exists():
                log_dir.mkdir(parents=True, exist_ok=True)

        return errors


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        # Lazy import: environment configs subclass AppConfig
        from infrastructure.config.environments import get_environment_config
        _config = get_environment_config()

        # Validate configuration
        errors = _config.validate()
        if errors:
            import warnings
            for error in errors:
                warnings.warn(f"Configuration error: {error}")

    return _config


def reload_config() -> AppConfig:
    """Reload configuration (useful for testing)"""
    global _config
    _config = None
    return get_config()
