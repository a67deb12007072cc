"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from dj_automation.exceptions import ConfigurationError
from dj_automation.models.config import AppConfig

log = logging.getLogger(__name__)

# Environment variable -> config key
ENV_OVERRIDES = {
    "YOUTUBE_TOKEN": "youtube_token",
    "YOUTUBE_BASE_URL": "youtube_base_url",
    "TUNEBAT_BASE_URL": "tunebat_base_url",
    "DJ_AUTOMATION_OUTPUT_DIR": "output_dir",
}

_BOOL_KEYS = {"write_tags", "headless", "fetch_details"}
_INT_KEYS = {"navigation_timeout_ms"}


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path, environ: Optional[Mapping[str, str]] = None):
        self.config_file_path = config_file_path
        self.environ = os.environ if environ is None else environ
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> AppConfig:
        """
        Loads configuration from the INI file (if present), applies environment
        and CLI overrides, and validates it.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated AppConfig object.

        Raises:
            ConfigurationError: If the config file is invalid or validation fails.
        """
        config_values: dict[str, Any] = {}

        if self.config_file_path.is_file():
            self._read_file()
            if self._migrate_if_needed():
                log.info(
                    "[yellow]Configuration file was updated with new default values."
                    "[/yellow]"
                )
            config_values.update(self.get_config_as_dict())
        else:
            log.debug(f"No config file at '{self.config_file_path}', using defaults.")

        for env_name, key in ENV_OVERRIDES.items():
            if value := self.environ.get(env_name):
                config_values[key] = value

        if cli_options:
            config_values.update(cli_options)

        try:
            return AppConfig(**config_values)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save. Missing keys get defaults.
        """
        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {}

        defaults = AppConfig.model_construct()
        for key in sorted(AppConfig.get_ini_keys()):
            value = settings.get(key, getattr(defaults, key, None))
            config["DEFAULT"][key] = self._to_ini_value(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _read_file(self) -> None:
        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

    def read_file_values(self) -> dict[str, str]:
        """
        Returns the file's 'DEFAULT' section as written, without migration,
        overrides or validation, so a broken config can still be inspected.
        """
        self._read_file()
        return dict(self._parser["DEFAULT"])

    def get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        values: dict[str, Any] = {}
        for key in AppConfig.get_ini_keys():
            if key not in section:
                continue
            try:
                if key in _BOOL_KEYS:
                    values[key] = section.getboolean(key)
                elif key in _INT_KEYS:
                    values[key] = section.getint(key)
                else:
                    values[key] = section.get(key)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for '{key}': {e}") from e
        return values

    @staticmethod
    def _to_ini_value(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return "" if value is None else str(value)

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        defaults = AppConfig.model_construct()
        config_section = self._parser["DEFAULT"]
        needs_saving = False

        for key in sorted(AppConfig.get_ini_keys()):
            if key not in config_section:
                config_section[key] = self._to_ini_value(getattr(defaults, key, None))
                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with "
                    f"value '{config_section[key]}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
