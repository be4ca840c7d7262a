"""Core configuration for forum maintenance tasks."""

from .settings import Settings, override_settings, settings

__all__ = ["Settings", "override_settings", "settings"]
