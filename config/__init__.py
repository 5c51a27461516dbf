"""Configuration package for Basecamp to Redmine script generation.

This package provides a type-safe configuration system using Pydantic v2
and pydantic-settings, fed from the environment, .env files and YAML.
"""

from .loader import ConfigLoader, load_settings
from .schemas.settings import Settings

__all__ = ["ConfigLoader", "Settings", "load_settings"]
