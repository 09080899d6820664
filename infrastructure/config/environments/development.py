"""
Development environment configuration overrides
"""

import os
from dataclasses import dataclass
from infrastructure.config.settings import AppConfig


@dataclass
class DevelopmentConfig(AppConfig):
    """Development environment configuration"""
    
    def __post_init__(self):
        # First load the base configuration (including secrets)
        base_config = AppConfig.load()
        
        # Copy base configuration
        self.storage = base_config.storage
        self.auth = base_config.auth
        self.notification = base_config.notification
        self.catalog = base_config.catalog
        self.ui = base_config.ui
        self.logging = base_config.logging
        
        # Development-specific overrides
        self.environment = "development"
        self.debug = True
        
        # More verbose logging in development
        self.logging.level = "DEBUG"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/dev-app.log"
        
        # Development UI changes
        self.ui.app_title = "🧪 EcoFinds (DEV)"
        self.ui.show_dev_inbox = True
        
        # Separate profile so dev data never mixes with a real one
        if not os.getenv("ECOFINDS_DB_PATH"):
            self.storage.db_path = "data/ecofinds-dev.db"
        
        # Faster feedback while iterating
        self.notification.simulated_delay_seconds = 0.0
        self.auth.require_email_verification = False


def get_development_config() -> DevelopmentConfig:
    """Get development-specific configuration"""
    return DevelopmentConfig()
