"""
Per-environment configuration presets for the permit portal
"""

import os
from config.app_config import AppConfig


def get_environment_config() -> AppConfig:
    """
    Pick the configuration preset named by APP_ENV

    - 'development' (default): local SQLite registry, verbose logging
    - 'production': Supabase registry, support credentials hidden
    - anything else: AppConfig.load() with secrets/environment only
    """
    env = os.getenv("APP_ENV", "development").lower()

    if env == "development":
        from .development import get_development_config
        return get_development_config()
    if env == "production":
        from .production import get_production_config
        return get_production_config()
    return AppConfig.load()
