"""
Configuration helpers for pagewright builds.
"""

from .models import DEFAULT_CONFIG_FILENAME, ConfigError, ErrorPolicy, SiteConfig, load_config
from .settings import EnvironmentSettings, get_settings

__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "ConfigError",
    "ErrorPolicy",
    "SiteConfig",
    "load_config",
    "EnvironmentSettings",
    "get_settings",
]
