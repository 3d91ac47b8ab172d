"""
Unit tests for configuration loading and the request-timeout source.
"""

import tomllib

import pytest
import toml

from clustermon.config import DEFAULT_CONFIG_PATH, load_config, load_config_or_default, resolve_request_timeout
from clustermon.models import AppConfig
from clustermon.validation import ValidationError


@pytest.mark.unit
class TestLoadConfig:
    """Test cases for load_config."""

    def test_load_config_from_file(self, config_files):
        config = load_config(config_files["config"])

        assert config.monitor.request_timeout == 5
        assert config.monitor.interval_seconds == 2.0
        assert config.source_path == config_files["config"]

    def test_load_config_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "missing.toml")

    def test_load_config_malformed_toml(self, temp_dir):
        config_file = temp_dir / "config.toml"
        config_file.write_text("[monitor\nrequest_timeout = ")

        with pytest.raises(tomllib.TOMLDecodeError):
            load_config(config_file)

    def test_load_config_invalid_value(self, temp_dir, sample_config_data):
        sample_config_data["connection"]["request_timeout"] = 0
        config_file = temp_dir / "config.toml"
        with open(config_file, "w") as f:
            toml.dump({"monitor": sample_config_data}, f)

        with pytest.raises(ValidationError):
            load_config(config_file)

    def test_shipped_default_config_loads(self):
        config = load_config(DEFAULT_CONFIG_PATH)

        assert config.monitor.request_timeout == 5


@pytest.mark.unit
class TestResolveRequestTimeout:
    """Test cases for resolve_request_timeout."""

    def test_reads_configured_timeout(self, temp_dir, sample_config_data):
        sample_config_data["connection"]["request_timeout"] = 12
        config_file = temp_dir / "config.toml"
        with open(config_file, "w") as f:
            toml.dump({"monitor": sample_config_data}, f)

        assert resolve_request_timeout(config_file) == 12

    def test_missing_file_falls_back_to_default(self, temp_dir):
        assert resolve_request_timeout(temp_dir / "missing.toml") == 5

    def test_invalid_timeout_falls_back_to_default(self, temp_dir):
        config_file = temp_dir / "config.toml"
        with open(config_file, "w") as f:
            toml.dump({"monitor": {"connection": {"request_timeout": -1}}}, f)

        assert resolve_request_timeout(config_file) == 5

    def test_malformed_file_falls_back_to_default(self, temp_dir):
        config_file = temp_dir / "config.toml"
        config_file.write_text("not = [valid")

        assert resolve_request_timeout(config_file) == 5


@pytest.mark.unit
class TestLoadConfigOrDefault:
    """Test cases for load_config_or_default."""

    def test_reads_existing_file(self, config_files):
        config = load_config_or_default(config_files["config"])

        assert config.source_path == config_files["config"]

    def test_missing_file_gives_defaults(self, temp_dir, caplog):
        config = load_config_or_default(temp_dir / "missing.toml")

        assert config == AppConfig()
        assert "Using default configuration" in caplog.text
