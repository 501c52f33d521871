"""Configuration package."""

from workworth.config.settings import WorkworthSettings, get_settings

__all__ = [
    "WorkworthSettings",
    "get_settings",
]
