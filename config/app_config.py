"""
Unified Configuration System for the PTA Permit Registry Portal

This module provides a centralized configuration system that consolidates all application settings,
supports environment-based overrides, and provides type-safe configuration access.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import streamlit as st
import os
from pathlib import Path


SUPPORTED_BACKENDS = ("sqlite", "supabase")


@dataclass
class StoreConfig:
    """Record store configuration"""
    backend: str = "sqlite"
    supabase_url: str = ""
    supabase_key: str = ""
    sqlite_path: str = "pta_registry.db"
    request_timeout_seconds: Optional[float] = None

    @classmethod
    def from_secrets(cls) -> 'StoreConfig':
        """Load store config from Streamlit secrets"""
        backend = os.getenv("PTA_STORE_BACKEND", "sqlite").lower()
        sqlite_path = os.getenv("PTA_SQLITE_PATH", "pta_registry.db")

        # In test environment, prefer environment variables
        if os.getenv("PYTEST_CURRENT_TEST") is not None:
            return cls(
                backend=backend,
                supabase_url=os.getenv("SUPABASE_URL", ""),
                supabase_key=os.getenv("SUPABASE_KEY", ""),
                sqlite_path=sqlite_path
            )

        try:
            return cls(
                backend=st.secrets.get("PTA_STORE_BACKEND", backend).lower(),
                supabase_url=st.secrets.get("SUPABASE_URL", ""),
                supabase_key=st.secrets.get("SUPABASE_KEY", ""),
                sqlite_path=st.secrets.get("PTA_SQLITE_PATH", sqlite_path)
            )
        except Exception:
            # Fallback to environment variables if secrets not available
            return cls(
                backend=backend,
                supabase_url=os.getenv("SUPABASE_URL", ""),
                supabase_key=os.getenv("SUPABASE_KEY", ""),
                sqlite_path=sqlite_path
            )


@dataclass
class AuthConfig:
    """Authentication configuration"""
    enabled: bool = True
    login_delay_seconds: float = 1.2
    default_admin_username: str = "admin"
    default_admin_password: str = "pta123"
    default_admin_name: str = "Arthur Admin"
    show_support_credentials: bool = True


@dataclass
class RegistryConfig:
    """Permit registry behaviour"""
    expiry_window_days: int = 30
    recent_feed_size: int = 5
    permit_prefix: str = "PTA"
    report_filename_prefix: str = "PTA_Report"


@dataclass
class UIConfig:
    """User interface configuration"""
    app_title: str = "Permit Control Center"
    authority_name: str = "Public Transport Authority"
    system_name: str = "National Permit Management System"
    portal_name: str = "PTA PORTAL"
    page_icon: str = "🛡️"
    toast_seconds: int = 3


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
    store: StoreConfig = field(default_factory=StoreConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Environment settings
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def load(cls) -> 'AppConfig':
        """Load configuration from secrets/environment, without per-environment presets"""
        config = cls()
        config.store = StoreConfig.from_secrets()
        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if self.store.backend not in SUPPORTED_BACKENDS:
            errors.append(f"Unsupported store backend: {self.store.backend}")

        # Supabase credentials are only needed for the remote backend
        if self.store.backend == "supabase":
            if not self.store.supabase_url:
                errors.append("Supabase URL is required")
            if not self.store.supabase_key:
                errors.append("Supabase key is required")

        if self.store.backend == "sqlite":
            db_dir = Path(self.store.sqlite_path).parent
            if not db_dir.exists():
                db_dir.mkdir(parents=True, exist_ok=True)

        if self.logging.enable_file_logging:
            log_dir = Path(self.logging.log_file).parent
            if not log_dir.exists():
                log_dir.mkdir(parents=True, exist_ok=True)

        if self.registry.expiry_window_days < 0:
            errors.append("Expiry window must not be negative")

        return errors

    def get_supabase_config(self) -> Dict[str, Any]:
        """Get Supabase connection settings"""
        return {
            "url": self.store.supabase_url,
            "key": self.store.supabase_key,
            "timeout": self.store.request_timeout_seconds
        }


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        from config.environments import get_environment_config
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
