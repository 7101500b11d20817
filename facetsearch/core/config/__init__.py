"""Configuration module for facetsearch.

Usage:
    from facetsearch.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.LOCAL:
        ...
"""

from facetsearch.core.config.enums import Environment
from facetsearch.core.config.settings import Settings

__all__ = [
    "Settings",
    "Environment",
    "settings",
]

# Singleton settings instance
settings = Settings()
