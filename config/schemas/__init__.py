"""Configuration schemas package.

This package contains Pydantic models for configuration validation.
"""

from .settings import Settings

__all__ = ["Settings"]
