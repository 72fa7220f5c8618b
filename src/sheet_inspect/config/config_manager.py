"""Configuration management for the spreadsheet inspector.

This module provides centralized configuration loading and management
with support for YAML files, environment variable overrides, and validation.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from sheet_inspect.models.data_models import (
    AnalysisConfig,
    Config,
    LoggingConfig,
    MemoryConfig,
    OutputConfig,
    WorkbookConfig,
)


logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


class ConfigManager:
    """Manages application configuration loading and validation.

    Configuration Loading Order:
    1. If config_path is provided, load that file
    2. If config_path is None, try to load config/default.yaml
    3. If config/default.yaml doesn't exist, use built-in defaults

    Values from the file are deep-merged over the built-in defaults, then
    ``SHEET_INSPECT_*`` environment variables override individual settings.

    Example:
        >>> config_manager = ConfigManager()
        >>> config = config_manager.load_config()
        >>> print(config.analysis.top_values)
        10
    """

    # Environment variable prefix
    ENV_PREFIX = "SHEET_INSPECT_"

    DEFAULT_CONFIG_PATH = Path("config/default.yaml")

    # Default configuration values
    DEFAULT_CONFIG = {
        "analysis": {
            "full_list_threshold": 20,
            "top_values": 10,
            "debug_row_limit": 100,
            "value_display_length": 100,
            "image_hint_keyword": "bild",
        },
        "memory": {
            "limit_mb": 2000,
        },
        "workbook": {
            "max_file_size": 500,
            "extensions": [".xlsx", ".xlsm"],
        },
        "output": {
            "format": "console",
            "file": None,
        },
        "logging": {
            "level": "WARNING",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "file": {
                "enabled": False,
                "path": "./logs/sheet_inspect.log",
            },
            "console": {
                "enabled": True,
            },
            "structured": {
                "enabled": False,
            },
        },
    }

    ENV_MAPPINGS = {
        "FULL_LIST_THRESHOLD": ["analysis", "full_list_threshold"],
        "TOP_VALUES": ["analysis", "top_values"],
        "DEBUG_ROW_LIMIT": ["analysis", "debug_row_limit"],
        "VALUE_DISPLAY_LENGTH": ["analysis", "value_display_length"],
        "MEMORY_LIMIT": ["memory", "limit_mb"],
        "MAX_FILE_SIZE": ["workbook", "max_file_size"],
        "OUTPUT_FORMAT": ["output", "format"],
        "OUTPUT_FILE": ["output", "file"],
        "LOG_LEVEL": ["logging", "level"],
        "LOG_FILE_ENABLED": ["logging", "file", "enabled"],
        "LOG_FILE": ["logging", "file", "path"],
        "STRUCTURED_LOGGING": ["logging", "structured", "enabled"],
    }

    def __init__(self) -> None:
        """Initialize configuration manager."""
        self._config_cache: Dict[str, Config] = {}

    def load_config(
        self,
        config_path: Optional[Union[str, Path]] = None,
        use_env_overrides: bool = True
    ) -> Config:
        """Load configuration from file with optional environment overrides.

        Args:
            config_path: Path to configuration file. If None, will try to load
                        config/default.yaml, falling back to built-in defaults
            use_env_overrides: Whether to apply environment variable overrides

        Returns:
            Loaded and validated configuration

        Raises:
            ConfigurationError: If configuration loading or validation fails
        """
        cache_key = f"{config_path}:{use_env_overrides}"
        if cache_key in self._config_cache:
            logger.debug(f"Using cached configuration for {cache_key}")
            return self._config_cache[cache_key]

        try:
            config_dict = self._load_config_dict(config_path)

            if use_env_overrides:
                config_dict = self._apply_env_overrides(config_dict)

            config = self._dict_to_config(config_dict)
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        self._config_cache[cache_key] = config
        logger.debug(f"Configuration loaded from {config_path or 'default'}")
        return config

    def _load_config_dict(self, config_path: Optional[Union[str, Path]]) -> Dict[str, Any]:
        """Load configuration dictionary from file or defaults.

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary
        """
        defaults = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_path is None:
            if not self.DEFAULT_CONFIG_PATH.exists():
                logger.debug("No config path provided and config/default.yaml not found, using built-in defaults")
                return defaults
            config_path = self.DEFAULT_CONFIG_PATH

        config_file = Path(config_path).expanduser()
        if not config_file.exists():
            logger.warning(f"Configuration file not found: {config_file}, using defaults")
            return defaults

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read {config_file}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Configuration in {config_file} must be a mapping")

        logger.debug(f"Loaded configuration from {config_file}")
        return self._deep_merge(defaults, file_config)

    def _apply_env_overrides(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration.

        Args:
            config_dict: Base configuration dictionary

        Returns:
            Configuration dictionary with environment overrides applied
        """
        for suffix, config_path in self.ENV_MAPPINGS.items():
            env_var = f"{self.ENV_PREFIX}{suffix}"
            env_value = os.getenv(env_var)
            if env_value is not None:
                converted_value = self._convert_env_value(env_value)
                self._set_nested_value(config_dict, config_path, converted_value)
                logger.debug(f"Applied environment override: {env_var}={converted_value}")

        extensions_env = os.getenv(f"{self.ENV_PREFIX}EXTENSIONS")
        if extensions_env:
            extensions = [ext.strip() for ext in extensions_env.split(",") if ext.strip()]
            config_dict["workbook"]["extensions"] = extensions
            logger.debug(f"Applied extensions override: {extensions}")

        return config_dict

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to bool, int, float or str."""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"

        try:
            if "." not in value:
                return int(value)
            return float(value)
        except ValueError:
            return value

    def _set_nested_value(
        self,
        dictionary: Dict[str, Any],
        path: List[str],
        value: Any
    ) -> None:
        """Set a nested dictionary value using a path list."""
        for key in path[:-1]:
            dictionary = dictionary.setdefault(key, {})
        dictionary[path[-1]] = value

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> Config:
        """Convert configuration dictionary to Config object.

        Raises:
            ConfigurationError: If a value fails validation
        """
        analysis = config_dict.get("analysis", {})
        memory = config_dict.get("memory", {})
        workbook = config_dict.get("workbook", {})
        output = config_dict.get("output", {})
        logging_config = config_dict.get("logging", {})

        try:
            return Config(
                analysis=AnalysisConfig(
                    full_list_threshold=int(analysis.get("full_list_threshold", 20)),
                    top_values=int(analysis.get("top_values", 10)),
                    debug_row_limit=int(analysis.get("debug_row_limit", 100)),
                    value_display_length=int(analysis.get("value_display_length", 100)),
                    image_hint_keyword=str(analysis.get("image_hint_keyword", "bild")),
                ),
                memory=MemoryConfig(limit_mb=int(memory.get("limit_mb", 2000))),
                workbook=WorkbookConfig(
                    max_file_size_mb=int(workbook.get("max_file_size", 500)),
                    extensions=list(workbook.get("extensions", [".xlsx", ".xlsm"])),
                ),
                output=OutputConfig(
                    format=str(output.get("format", "console")),
                    file=Path(output["file"]).expanduser() if output.get("file") else None,
                ),
                logging=LoggingConfig(
                    level=str(logging_config.get("level", "WARNING")),
                    format=logging_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                    console_enabled=logging_config.get("console", {}).get("enabled", True),
                    file_enabled=logging_config.get("file", {}).get("enabled", False),
                    file_path=Path(logging_config.get("file", {}).get("path", "./logs/sheet_inspect.log")),
                    structured_enabled=logging_config.get("structured", {}).get("enabled", False),
                ),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

    def save_config(self, config: Config, config_path: Union[str, Path]) -> None:
        """Save configuration to YAML file.

        Raises:
            ConfigurationError: If saving fails
        """
        try:
            config_file = Path(config_path)
            config_file.parent.mkdir(parents=True, exist_ok=True)

            with open(config_file, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self._config_to_dict(config), f, default_flow_style=False, sort_keys=False)

            logger.info(f"Configuration saved to {config_file}")

        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to save configuration: {e}") from e

    def _config_to_dict(self, config: Config) -> Dict[str, Any]:
        """Convert Config object to dictionary for serialization."""
        return {
            "analysis": {
                "full_list_threshold": config.analysis.full_list_threshold,
                "top_values": config.analysis.top_values,
                "debug_row_limit": config.analysis.debug_row_limit,
                "value_display_length": config.analysis.value_display_length,
                "image_hint_keyword": config.analysis.image_hint_keyword,
            },
            "memory": {
                "limit_mb": config.memory.limit_mb,
            },
            "workbook": {
                "max_file_size": config.workbook.max_file_size_mb,
                "extensions": list(config.workbook.extensions),
            },
            "output": {
                "format": config.output.format,
                "file": str(config.output.file) if config.output.file else None,
            },
            "logging": {
                "level": config.logging.level,
                "format": config.logging.format,
                "file": {
                    "enabled": config.logging.file_enabled,
                    "path": str(config.logging.file_path),
                },
                "console": {
                    "enabled": config.logging.console_enabled,
                },
                "structured": {
                    "enabled": config.logging.structured_enabled,
                },
            },
        }

    def clear_cache(self) -> None:
        """Clear configuration cache."""
        self._config_cache.clear()
        logger.debug("Configuration cache cleared")


# Global configuration manager instance
config_manager = ConfigManager()
