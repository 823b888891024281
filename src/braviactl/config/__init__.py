"""Configuration management for braviactl.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for the pre-shared key.
"""

from braviactl.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
