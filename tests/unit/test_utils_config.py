"""
Unit tests for shardwise.utils.config module.

Tests cover:
- Config dataclass defaults
- Config serialization and saving
- Config file loading
- Environment variable overrides
"""

import pytest


class TestConfig:
    """Tests for Config dataclass."""

    @pytest.mark.unit
    def test_default_values(self, default_config):
        """Test that default config has expected values."""
        assert default_config.logging.level == "INFO"
        assert default_config.logging.file is None
        assert default_config.scheduler.max_sessions == 0
        assert default_config.scheduler.default_max_instances == 1
        assert default_config.enrich.download_dir == "~/.shardwise/downloads"

    @pytest.mark.unit
    def test_to_dict(self, default_config):
        """Test config serialization to dictionary."""
        d = default_config.to_dict()

        assert set(d) == {"logging", "scheduler", "enrich"}
        assert d["scheduler"]["default_max_instances"] == 1

    @pytest.mark.unit
    def test_save_config(self, default_config, temp_dir):
        """Test saving config to a YAML file."""
        config_path = temp_dir / "nested" / "config.yaml"
        default_config.save(config_path)

        content = config_path.read_text()
        assert "scheduler:" in content
        assert "max_sessions:" in content


class TestLoadConfig:
    """Tests for load_config function."""

    @pytest.mark.unit
    def test_load_default(self, temp_config_dir):
        """Test loading config with no file uses defaults."""
        from shardwise.utils.config import load_config

        config = load_config()

        assert config.scheduler.max_sessions == 0
        assert config.logging.level == "INFO"

    @pytest.mark.unit
    def test_load_from_file(self, config_file):
        """Test loading config from a YAML file."""
        from shardwise.utils.config import load_config, get_config

        config = load_config(config_file)

        assert config.logging.level == "DEBUG"
        assert config.logging.verbose is True
        assert config.scheduler.max_sessions == 6
        assert config.enrich.download_dir == "/var/downloads"
        assert get_config() is config

    @pytest.mark.unit
    def test_unknown_keys_ignored(self, temp_dir):
        """Test unknown sections and keys don't break loading."""
        from shardwise.utils.config import load_config

        path = temp_dir / "config.yaml"
        path.write_text("daemon:\n  port: 1\nscheduler:\n  bogus: 2\n  max_sessions: 3\n")

        config = load_config(path)

        assert config.scheduler.max_sessions == 3
        assert not hasattr(config.scheduler, "bogus")

    @pytest.mark.unit
    def test_invalid_file_falls_back(self, temp_dir):
        """Test an unparsable file leaves defaults in place."""
        from shardwise.utils.config import load_config

        path = temp_dir / "config.yaml"
        path.write_text("scheduler: [unclosed\n")

        config = load_config(path)

        assert config.scheduler.max_sessions == 0

    @pytest.mark.unit
    def test_env_var_override(self, config_file, monkeypatch):
        """Test environment variables win over the file."""
        from shardwise.utils.config import load_config

        monkeypatch.setenv("SHARDWISE_MAX_SESSIONS", "9")
        monkeypatch.setenv("SHARDWISE_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("SHARDWISE_DOWNLOAD_DIR", "/mnt/dl")

        config = load_config(config_file)

        assert config.scheduler.max_sessions == 9
        assert config.logging.level == "WARNING"
        assert config.enrich.download_dir == "/mnt/dl"


class TestInitConfigFile:
    """Tests for init_config_file."""

    @pytest.mark.unit
    def test_creates_once(self, temp_config_dir):
        """Test the default file is created and not overwritten."""
        from shardwise.utils import config as config_module

        config_module.init_config_file()
        config_file = temp_config_dir / "config.yaml"
        assert config_file.exists()

        config_file.write_text("custom: true\n")
        config_module.init_config_file()
        assert config_file.read_text() == "custom: true\n"
