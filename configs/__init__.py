"""
Analytics Configuration Management

Loads and manages all analytics configurations.
"""

import json
import logging
from typing import Dict, Any
from pathlib import Path

import jsonschema

from analytics.models.config import Config

logger = logging.getLogger(__name__)

CONFIG_FILES = {
    'indicators': 'indicators.json',
    'levels': 'levels.json',
    'heatmap': 'heatmap.json',
    'data': 'data.json',
}


class ConfigLoader:
    """Loads and manages analytics configurations."""

    def __init__(self, config_dir: str = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Directory containing configuration files
                (defaults to this package's directory)
        """
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).parent
        self.configs = {}
        self._load_all_configs()

    def _load_all_configs(self) -> None:
        """Load all configuration files."""
        for config_name in CONFIG_FILES:
            self.configs[config_name] = self._load(config_name)

    def _load(self, config_name: str) -> Dict[str, Any]:
        """
        Load one configuration file, validating it against
        ``<name>.schema.json`` when that schema exists.

        A missing file yields {}; a parse or validation error is logged and
        yields {} so component defaults apply.
        """
        config_path = self.config_dir / CONFIG_FILES[config_name]
        if not config_path.exists():
            return {}

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)

            schema_path = self.config_dir / f'{config_name}.schema.json'
            if schema_path.exists():
                with open(schema_path, 'r', encoding='utf-8') as sf:
                    schema = json.load(sf)
                jsonschema.validate(instance=config, schema=schema)
        except (OSError, json.JSONDecodeError, jsonschema.ValidationError) as e:
            logger.warning("config_load_failed", extra={
                "config": config_name,
                "file": str(config_path),
                "error": str(e).splitlines()[0]
            })
            return {}

        return config

    def get_config(self, config_name: str) -> Dict[str, Any]:
        """
        Get configuration by name.

        Args:
            config_name: Name of configuration

        Returns:
            Configuration dictionary
        """
        return self.configs.get(config_name, {})

    def get_all_configs(self) -> Dict[str, Dict[str, Any]]:
        """
        Get all configurations.

        Returns:
            Dictionary of all configurations
        """
        return self.configs.copy()

    def reload_config(self, config_name: str) -> None:
        """
        Reload specific configuration.

        Args:
            config_name: Name of configuration to reload
        """
        if config_name not in CONFIG_FILES:
            raise KeyError(f"Unknown configuration '{config_name}'")
        self.configs[config_name] = self._load(config_name)

    def build_config(self) -> Config:
        """Assemble the analytics Config from the loaded files."""
        return Config(
            indicator_configs=self.get_config('indicators'),
            level_configs=self.get_config('levels'),
            heatmap_configs=self.get_config('heatmap'),
            data_configs=self.get_config('data'),
        )


# Global configuration loader instance
config_loader = ConfigLoader()
