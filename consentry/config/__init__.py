"""Configuration loading for Consentry.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from consentry.config import get_settings

    settings = get_settings()
    timespec = settings.consent.date_format.timespec
"""

from functools import lru_cache

from consentry.config.loader import load_config
from consentry.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The result is cached for the lifetime of the process.
    Call `reload_settings()` after changing configuration files.
    """
    set_toml_config(load_config())
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
