"""
Development environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig, StoreConfig


@dataclass
class DevelopmentConfig(AppConfig):
    """Development environment configuration"""

    def __post_init__(self):

        # Development-specific overrides
        self.environment = "development"
        self.debug = True

        # More verbose logging in development
        self.logging.level = "DEBUG"
        self.logging.enable_file_logging = True
        self.logging.log_file = "logs/dev-app.log"

        # Local registry file, no cloud credentials needed
        self.store = StoreConfig.from_secrets()
        self.store.backend = "sqlite"
        self.store.sqlite_path = "data/dev-registry.db"

        self.ui.app_title = "Permit Control Center (DEV)"
        self.auth.show_support_credentials = True


def get_development_config() -> DevelopmentConfig:
    """Get development-specific configuration"""
    return DevelopmentConfig()
