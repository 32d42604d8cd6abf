"""
Loads optional defaults from an INI configuration file and merges CLI options.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.markup import escape

from gdrive_dl.exceptions import ConfigurationError
from gdrive_dl.models.config import DownloadConfig

log = logging.getLogger(__name__)

_BOOL_KEYS = ("overwrite", "mtimes", "quiet", "verbose", "continue_on_errors")
_INT_KEYS = ("max_redirects", "timeout")


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "gdrive-dl"


class ConfigManager:
    """
    Reads the `[DEFAULT]` section of an INI file as option defaults.

    The file is optional: when it does not exist, the model defaults apply.
    """

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser()

    def load_config(self, cli_options: dict[str, Any] | None = None) -> DownloadConfig:
        """
        Loads defaults from the INI file, applies CLI overrides, and validates.

        Args:
            cli_options: Options given on the command line. Keys whose value
                is None are treated as not given.

        Returns:
            A validated DownloadConfig object.

        Raises:
            ConfigurationError: If the file cannot be parsed or validation fails.
        """
        settings: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
                settings.update(self._get_config_as_dict())
            except (configparser.Error, ValueError) as e:
                raise ConfigurationError(
                    f"Error parsing configuration file '{self.config_file_path}': {e}"
                ) from e
            log.debug(f"Loaded defaults from {escape(str(self.config_file_path))}")

        if cli_options:
            settings.update({k: v for k, v in cli_options.items() if v is not None})

        try:
            return DownloadConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the known keys present in the 'DEFAULT' section."""
        section = self._parser["DEFAULT"]
        known_keys = DownloadConfig.get_ini_keys()
        unknown = set(section) - known_keys
        if unknown:
            log.warning(
                f"[yellow]Ignoring unknown configuration keys: "
                f"{escape(', '.join(sorted(unknown)))}[/yellow]"
            )

        values: dict[str, Any] = {}
        for key in known_keys:
            if key not in section:
                continue
            if key in _BOOL_KEYS:
                values[key] = section.getboolean(key)
            elif key in _INT_KEYS:
                values[key] = section.getint(key)
            else:
                values[key] = section.get(key)
        return values
