"""Configuration loader for Basecamp to Redmine script generation.

This module provides a simple interface for loading settings from the
environment, ``.env`` files and an optional YAML file into the Pydantic
settings model.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .schemas.settings import Settings

logger = logging.getLogger(__name__)

# YAML sections are only for readability; their keys are flattened into Settings
YAML_SECTIONS = ("lengths", "redmine", "organizations", "failure", "filters", "logging")


def is_test_environment() -> bool:
    """Detect if code is running in a test environment.

    This checks for environment variables that would indicate pytest is running.

    Returns:
        bool: True if running in a test environment, False otherwise

    """
    # Check for pytest environment variable
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True

    # Check for our custom test mode flag (set by test fixtures)
    return os.environ.get("BC2R_TEST_MODE", "").lower() in ("true", "1", "yes")


class ConfigLoader:
    """Loads settings from environment variables, ``.env`` files and YAML.

    Precedence, lowest first: field defaults, environment (``BC2R_*``,
    including values loaded from ``.env``), YAML file, explicit overrides.
    """

    def __init__(
        self,
        config_file_path: Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the configuration loader.

        Args:
            config_file_path (Path): Path to the YAML configuration file (optional)
            overrides: Values taking precedence over every other source, e.g. CLI flags

        """
        self._load_environment_configuration()

        self.yaml_config: dict[str, Any] = {}
        if config_file_path is not None:
            self.yaml_config = self._load_yaml_config(config_file_path)

        values = {**self._flatten(self.yaml_config), **(overrides or {})}
        self.settings = Settings(**values)
        logger.debug("Configuration loaded with %d explicit values", len(values))

    def _load_environment_configuration(self) -> None:
        """Load environment variables from .env files based on execution context.

        - .env (base config for all environments)
        - .env.test (test-specific config, only in test environment)

        Later files override values from earlier files.
        """
        if Path(".env").exists():
            load_dotenv(".env")
            logger.debug("Loaded base environment from .env")

        if is_test_environment() and Path(".env.test").exists():
            load_dotenv(".env.test", override=True)
            logger.debug("Loaded test environment from .env.test")

    def _load_yaml_config(self, config_file_path: Path) -> dict[str, Any]:
        """Load configuration from YAML file.

        Args:
            config_file_path (Path): Path to the YAML configuration file

        Returns:
            dict: Configuration settings

        """
        try:
            with config_file_path.open("r", encoding="utf-8") as config_file:
                config: dict[str, Any] = yaml.safe_load(config_file)
                return config or {}
        except FileNotFoundError:
            logger.exception("Config file not found: %s", config_file_path)
            raise

    @staticmethod
    def _flatten(config: dict[str, Any]) -> dict[str, Any]:
        """Merge known sections into one flat mapping of setting names."""
        flat: dict[str, Any] = {}
        for key, value in config.items():
            if key in YAML_SECTIONS and isinstance(value, dict):
                flat.update(value)
            else:
                flat[key] = value
        return flat

    def get_settings(self) -> Settings:
        return self.settings


def load_settings(
    config_file_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load and validate settings in one call.

    Args:
        config_file_path: Optional YAML file
        overrides: Values taking precedence over file and environment

    Returns:
        Validated settings

    """
    return ConfigLoader(config_file_path, overrides).settings
