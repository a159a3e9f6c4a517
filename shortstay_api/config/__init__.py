"""
Configuration management for ShortStay API.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for all service configuration.
"""

from shortstay_api.config.settings import Settings, get_settings, load_shortstay_env

__all__ = ["Settings", "get_settings", "load_shortstay_env"]
