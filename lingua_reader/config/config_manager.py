"""Configuration persistence manager."""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from .config import LinguaReaderConfig
from .defaults import create_default_config

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manager for configuration persistence.

    Saves and loads the configuration to/from a JSON file. Path objects are
    serialized as strings, and a missing or invalid file falls back to the
    default configuration.
    """

    DEFAULT_CONFIG_FILE = Path.home() / ".lingua_reader" / "config.json"

    def __init__(self, config_file: Path | None = None):
        self.config_file = config_file or self.DEFAULT_CONFIG_FILE

    def save_config(self, config: LinguaReaderConfig) -> None:
        """Save configuration to the JSON file.

        Args:
            config: Configuration to save

        Raises:
            OSError: If unable to create directory or write file
        """
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        config_dict = self._paths_to_strings(asdict(config))
        with self.config_file.open("w", encoding="utf-8") as f:
            json.dump(config_dict, f, indent=2, ensure_ascii=False)

    def load_config(self) -> LinguaReaderConfig:
        """Load configuration from the JSON file.

        Returns:
            Loaded configuration, or the default configuration if the file
            doesn't exist or cannot be understood
        """
        if not self.config_file.exists():
            return create_default_config()

        try:
            with self.config_file.open("r", encoding="utf-8") as f:
                config_dict = json.load(f)
            return LinguaReaderConfig(**config_dict)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning(f"Invalid config file, using defaults: {e}")
            return create_default_config()

    def config_exists(self) -> bool:
        """Check if the configuration file exists."""
        return self.config_file.exists()

    def delete_config(self) -> None:
        """Delete the configuration file so defaults apply on next load."""
        if self.config_file.exists():
            self.config_file.unlink()

    @staticmethod
    def _paths_to_strings(data: dict[str, Any]) -> dict[str, Any]:
        """Convert Path objects (and tuples) into JSON-friendly values."""
        result: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, Path):
                result[key] = str(value)
            elif isinstance(value, dict):
                result[key] = ConfigManager._paths_to_strings(value)
            elif isinstance(value, (list, tuple)):
                result[key] = [str(item) if isinstance(item, Path) else item for item in value]
            else:
                result[key] = value
        return result
