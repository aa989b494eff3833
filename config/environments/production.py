"""
Production environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig, StoreConfig


@dataclass
class ProductionConfig(AppConfig):
    """Production environment configuration"""

    def __post_init__(self):

        # Production-specific overrides
        self.environment = "production"
        self.debug = False

        # Production logging - less verbose, focus on errors
        self.logging.level = "INFO"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/prod-app.log"

        # Production talks to the hosted registry
        self.store = StoreConfig.from_secrets()
        self.store.backend = "supabase"

        # Support credentials are never advertised on the login page
        self.auth.show_support_credentials = False
        self.ui.app_title = "Permit Control Center"


def get_production_config() -> ProductionConfig:
    """Get production-specific configuration"""
    return ProductionConfig()
