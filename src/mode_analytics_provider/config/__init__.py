"""Provider configuration."""

from .settings import REQUIRED_SETTINGS, Settings

__all__ = ["REQUIRED_SETTINGS", "Settings"]
