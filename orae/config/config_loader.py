"""Configuration loader with strict section validation."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from orae.utils.path_resolver import get_app_resource_path


DEFAULT_CONFIG_PATH = "orae/config/config.json"

REQUIRED_SECTIONS = (
    "logging",
    "board",
    "cache",
    "tracked_player",
    "move_analysis",
    "game_analysis",
    "windowing",
    "playback",
    "performance",
)


class ConfigLoader:
    """Loads config.json and checks that every required section is present."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize the loader.

        Args:
            config_path: Path to a configuration file. Defaults to the bundled config.json.
        """
        self.config_path = Path(config_path) if config_path else get_app_resource_path(DEFAULT_CONFIG_PATH)

    def load(self) -> Dict[str, Any]:
        """Load and validate the configuration.

        Returns:
            Configuration dictionary.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ValueError: If the file is not valid JSON or sections are missing.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {self.config_path}: {e}") from e

        errors = self.validate(config)
        if errors:
            raise ValueError(
                f"Invalid configuration in {self.config_path}: " + "; ".join(errors)
            )
        return config

    @staticmethod
    def validate(config: Any) -> List[str]:
        """Check the top-level structure of a configuration object.

        Args:
            config: Parsed configuration.

        Returns:
            List of problems (empty if the configuration is usable).
        """
        if not isinstance(config, dict):
            return ["configuration root must be an object"]

        errors = []
        for section in REQUIRED_SECTIONS:
            if section not in config:
                errors.append(f"missing section '{section}'")
            elif not isinstance(config[section], dict):
                errors.append(f"section '{section}' must be an object")
        return errors
