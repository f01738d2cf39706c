"""
Configuration package.

Exports the singleton settings instance for easy importing.

Usage:
    from clientdb.config import settings

    print(settings.database_url)
"""

from clientdb.config.settings import Settings, settings, print_settings

# Make these available when importing from clientdb.config
__all__ = [
    "Settings",
    "settings",
    "print_settings",
]
