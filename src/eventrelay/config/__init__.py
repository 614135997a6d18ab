"""Configuration management for eventrelay.

Loads and validates YAML-based configuration with Pydantic models.
Environment variables prefixed with EVENTRELAY_ override file values.
"""

from eventrelay.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
