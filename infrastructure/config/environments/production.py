"""
Production environment configuration overrides
"""

from dataclasses import dataclass
from infrastructure.config.settings import AppConfig


@dataclass
class ProductionConfig(AppConfig):
    """Production environment configuration"""
    
    def __post_init__(self):
        base_config = AppConfig.load()
        self.storage = base_config.storage
        self.auth = base_config.auth
        self.notification = base_config.notification

        # Production-specific overrides
        self.environment = "production"
        self.debug = False
        
        # Production logging - less verbose, focus on errors
        self.logging.level = "INFO"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/prod-app.log"
        
        # Production UI - clean and professional
        self.ui.app_title = "🌱 EcoFinds"
        self.ui.show_dev_inbox = False
        
        # Production security settings
        self.auth.bcrypt_rounds = 12
        self.auth.require_email_verification = True
        
        # Real shoppers should not see demo listings
        self.catalog.seed_sample_data = False


def get_production_config() -> ProductionConfig:
    """Get production-specific configuration"""
    return ProductionConfig()
