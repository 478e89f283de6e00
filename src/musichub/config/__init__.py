"""Configuration module for musichub."""

from .settings import (
    DatabaseSettings,
    OAuthServiceSettings,
    Settings,
    TunezSettings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "OAuthServiceSettings",
    "Settings",
    "TunezSettings",
    "get_settings",
]
