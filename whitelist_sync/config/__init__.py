"""Settings loading and logging setup."""

from .settings import ConfigurationError, Settings, load_settings, setup_logging

__all__ = ["ConfigurationError", "Settings", "load_settings", "setup_logging"]
