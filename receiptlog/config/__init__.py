"""Configuration package."""

from receiptlog.config.settings import (
    AppSettings,
    ImageSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ImageSettings",
    "Settings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
