"""Unit tests for configuration manager."""

from pathlib import Path

import pytest
import yaml

from sheet_inspect.config.config_manager import ConfigManager, ConfigurationError
from sheet_inspect.models.data_models import Config


class TestConfigManager:
    """Test cases for ConfigManager class."""

    def test_init(self):
        """Test ConfigManager initialization."""
        config_manager = ConfigManager()
        assert config_manager._config_cache == {}
        assert config_manager.ENV_PREFIX == "SHEET_INSPECT_"

    def test_load_config_with_defaults(self):
        """Test loading configuration with default values."""
        config = ConfigManager().load_config(None, use_env_overrides=False)

        assert isinstance(config, Config)
        assert config.analysis.full_list_threshold == 20
        assert config.analysis.top_values == 10
        assert config.analysis.debug_row_limit == 100
        assert config.analysis.value_display_length == 100
        assert config.memory.limit_mb == 2000
        assert config.workbook.extensions == [".xlsx", ".xlsm"]
        assert config.output.format == "console"

    def test_load_config_from_file(self, sample_config_file: Path):
        """Test loading configuration from YAML file."""
        config = ConfigManager().load_config(sample_config_file, use_env_overrides=False)

        assert config.analysis.full_list_threshold == 15
        assert config.analysis.top_values == 5
        assert config.analysis.debug_row_limit == 50
        assert config.analysis.value_display_length == 40
        assert config.memory.limit_mb == 1024
        assert config.workbook.max_file_size_mb == 100
        assert config.workbook.extensions == [".xlsx"]
        assert config.output.format == "html"
        assert config.output.file == Path("./reports/report.html")
        assert config.logging.level == "INFO"
        assert config.logging.file_enabled

    def test_partial_file_is_merged_over_defaults(self, temp_dir: Path):
        """Test that unspecified values keep their defaults."""
        config_file = temp_dir / "partial.yaml"
        config_file.write_text("analysis:\n  top_values: 3\n")

        config = ConfigManager().load_config(config_file, use_env_overrides=False)

        assert config.analysis.top_values == 3
        assert config.analysis.full_list_threshold == 20
        assert config.logging.level == "WARNING"

    def test_load_config_nonexistent_file(self, temp_dir: Path):
        """Test loading configuration from non-existent file falls back to defaults."""
        config = ConfigManager().load_config(temp_dir / "nonexistent.yaml", use_env_overrides=False)

        assert isinstance(config, Config)
        assert config.analysis.top_values == 10

    def test_load_config_invalid_yaml(self, temp_dir: Path):
        """Test loading configuration from invalid YAML file raises error."""
        invalid_yaml_file = temp_dir / "invalid.yaml"
        invalid_yaml_file.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigManager().load_config(invalid_yaml_file)

    def test_load_config_not_a_mapping(self, temp_dir: Path):
        """Test that a YAML list is rejected."""
        config_file = temp_dir / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="must be a mapping"):
            ConfigManager().load_config(config_file)

    def test_invalid_values(self, temp_dir: Path):
        """Test that values failing validation raise ConfigurationError."""
        config_file = temp_dir / "bad.yaml"
        config_file.write_text("output:\n  format: docx\n")

        with pytest.raises(ConfigurationError, match="Invalid configuration value"):
            ConfigManager().load_config(config_file, use_env_overrides=False)

    def test_inconsistent_thresholds(self, temp_dir: Path):
        """Test that the full list threshold cannot be below the top values."""
        config_file = temp_dir / "bad.yaml"
        config_file.write_text("analysis:\n  full_list_threshold: 5\n  top_values: 10\n")

        with pytest.raises(ConfigurationError):
            ConfigManager().load_config(config_file, use_env_overrides=False)

    def test_environment_variable_overrides(self, sample_config_file: Path, env_override):
        """Test environment variable overrides."""
        env_override.set("SHEET_INSPECT_TOP_VALUES", "7")
        env_override.set("SHEET_INSPECT_MEMORY_LIMIT", "4096")
        env_override.set("SHEET_INSPECT_LOG_LEVEL", "DEBUG")
        env_override.set("SHEET_INSPECT_OUTPUT_FORMAT", "pdf")
        env_override.set("SHEET_INSPECT_STRUCTURED_LOGGING", "true")
        env_override.set("SHEET_INSPECT_EXTENSIONS", "xlsx, .XLSM")

        config = ConfigManager().load_config(sample_config_file, use_env_overrides=True)

        assert config.analysis.top_values == 7
        assert config.memory.limit_mb == 4096
        assert config.logging.level == "DEBUG"
        assert config.output.format == "pdf"
        assert config.logging.structured_enabled is True
        assert config.workbook.extensions == [".xlsx", ".xlsm"]

    def test_environment_overrides_disabled(self, env_override):
        """Test that overrides are ignored when disabled."""
        env_override.set("SHEET_INSPECT_TOP_VALUES", "7")

        config = ConfigManager().load_config(None, use_env_overrides=False)

        assert config.analysis.top_values == 10

    def test_config_caching(self, sample_config_file: Path):
        """Test that loaded configurations are cached."""
        config_manager = ConfigManager()
        first = config_manager.load_config(sample_config_file)
        second = config_manager.load_config(sample_config_file)

        assert first is second

        config_manager.clear_cache()
        assert config_manager.load_config(sample_config_file) is not first

    def test_save_config_round_trip(self, temp_dir: Path, sample_config_file: Path):
        """Test saving and reloading a configuration."""
        config_manager = ConfigManager()
        config = config_manager.load_config(sample_config_file, use_env_overrides=False)

        saved_file = temp_dir / "saved" / "config.yaml"
        config_manager.save_config(config, saved_file)

        with open(saved_file) as f:
            saved = yaml.safe_load(f)
        assert saved["analysis"]["top_values"] == 5
        assert saved["workbook"]["extensions"] == [".xlsx"]

        reloaded = ConfigManager().load_config(saved_file, use_env_overrides=False)
        assert reloaded == config

    @pytest.mark.parametrize("value,expected", [
        ("true", True),
        ("False", False),
        ("42", 42),
        ("1.5", 1.5),
        ("./path", "./path"),
    ])
    def test_convert_env_value(self, value, expected):
        """Test conversion of environment variable strings."""
        assert ConfigManager()._convert_env_value(value) == expected
