"""Infrastructure configuration module.

Centralized configuration management using Pydantic Settings.
"""

from sentinel.infrastructure.config.settings import (
    ClassifierSettings,
    FeedSettings,
    ObservabilitySettings,
    Settings,
    get_settings,
)

__all__ = [
    "ClassifierSettings",
    "FeedSettings",
    "ObservabilitySettings",
    "Settings",
    "get_settings",
]
