"""Configuration loading for Courier.

Usage:
    from courier.config import get_settings

    settings = get_settings()
    secret = settings.webhook.secret.get_secret_value()
"""

from functools import lru_cache

from courier.config.loader import load_config
from courier.config.settings import Settings, set_toml_config
from courier.observability.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    Falls back to code defaults plus environment variables when no
    config/default.toml can be found. Call `get_settings.cache_clear()`
    to reload configuration.
    """
    try:
        set_toml_config(load_config())
    except FileNotFoundError:
        logger.warning("config_file_not_found", msg="Using default configuration")
        set_toml_config({})

    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
