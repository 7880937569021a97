"""Config package - Application settings."""

from petshop.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
