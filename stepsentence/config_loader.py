"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from typing import Any, Dict
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'storage_dir': 'data',
    'log_dir': 'logs',
    'log_file': 'stepsentence.log',
    'ffmpeg_path': None,
    'sentence_gap_seconds': 0.2,
    'output_format': 'srt',
}

SUPPORTED_OUTPUT_FORMATS = ('srt', 'json')

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def defaults(self) -> dict:
        return dict(DEFAULT_CONFIG)

    def load_config(self, config_path: str) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Values missing from the file fall back to DEFAULT_CONFIG.

        Args:
            config_path: The path to the YAML configuration file.

        Returns:
            A dictionary containing the loaded configuration settings.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML,
                              holds invalid values, or cannot be read.
        """
        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
            logger.error(f"Configuration path is not a file: {config_path}")
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if loaded is None:
            loaded = {} # Empty file
        if not isinstance(loaded, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        config = self.defaults()
        config.update(loaded)
        self.validate(config)
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config

    def validate(self, config: dict) -> None:
        """
        Checks value types of known keys.

        Raises:
            ConfigurationError: If a value is invalid.
        """
        gap = config.get('sentence_gap_seconds')
        if isinstance(gap, bool) or not isinstance(gap, (int, float)) or gap < 0:
            raise ConfigurationError(f"'sentence_gap_seconds' must be a non-negative number, got {gap!r}")

        output_format = config.get('output_format')
        if not isinstance(output_format, str) or output_format.lower() not in SUPPORTED_OUTPUT_FORMATS:
            raise ConfigurationError(
                f"'output_format' must be one of {', '.join(SUPPORTED_OUTPUT_FORMATS)}, got {output_format!r}"
            )

        for key in ('storage_dir', 'log_dir', 'log_file'):
            if not isinstance(config.get(key), str) or not config[key]:
                raise ConfigurationError(f"'{key}' must be a non-empty string, got {config.get(key)!r}")
