"""
Configuration management for shardwise.

This module provides the tool-level configuration for shardwise with support
for YAML files, environment variable overrides, and programmatic access. Suite
files (which specs to run under which capabilities) live in shardwise.suite;
this module only holds settings that apply to every run.

Configuration sources (in order of precedence):
1. Environment variables (SHARDWISE_* prefix)
2. YAML configuration file (~/.shardwise/config.yaml)
3. Default values defined in dataclasses

Configuration sections:
- logging: Log level, file output, verbosity
- scheduler: Session ceiling and default per-capability instance limit
- enrich: Fallback download root used by capability enrichers
"""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict
from dataclasses import dataclass, field, asdict

from shardwise.utils.logging import get_logger

log = get_logger("config")

# Configuration directory and file paths
CONFIG_DIR = Path.home() / ".shardwise"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

@dataclass
class LoggingConfig:
    """
    Logging configuration section.
    """
    # Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL
    level: str = "INFO"
    # Optional path to log file (None = stderr only)
    file: Optional[str] = None
    # Include logger name and line number in messages
    verbose: bool = False

@dataclass
class SchedulerConfig:
    """
    Scheduler configuration section.
    """
    # Reported concurrency ceiling when a suite sets none (0 = derive from queues)
    max_sessions: int = 0
    # Instance limit for capabilities that don't declare max_instances
    default_max_instances: int = 1

@dataclass
class EnrichConfig:
    """
    Capability enrichment configuration section.
    """
    # Root for per-task download directories when a capability sets none
    download_dir: str = "~/.shardwise/downloads"


@dataclass
class Config:
    """
    Root configuration container for shardwise.
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    enrich: EnrichConfig = field(default_factory=EnrichConfig)

    def to_dict(self) -> dict:
        """
        Convert configuration to dictionary.

        :return: Nested dictionary representation of all configuration sections.
        """
        return asdict(self)

    def save(self, path: Path = None) -> None:
        """
        Save configuration to YAML file.

        Creates parent directories if they don't exist.

        :param path: Path to save config file (default: ~/.shardwise/config.yaml).
        """
        path = path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(
                self.to_dict(),
                f,
                default_flow_style=False,
                sort_keys=False
            )

        log.info(f"Config saved to {path}")

# Global configuration instance
config = Config()

def _apply_env_vars(cfg: Config) -> None:
    """
    Apply SHARDWISE_* environment variable overrides to configuration.

    Values are converted to the type of the field they replace.

    :param cfg: Configuration instance to update.
    """
    env_mappings = {
        "SHARDWISE_LOG_LEVEL": ("logging", "level"),
        "SHARDWISE_LOG_FILE": ("logging", "file"),
        "SHARDWISE_MAX_SESSIONS": ("scheduler", "max_sessions"),
        "SHARDWISE_DOWNLOAD_DIR": ("enrich", "download_dir"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            section_obj = getattr(cfg, section)
            current = getattr(section_obj, key)

            if isinstance(current, bool):
                value = value.lower() in ("true", "1", "yes")
            elif isinstance(current, int):
                value = int(value)

            setattr(section_obj, key, value)
            log.debug(f"Config override from {env_var}: {section}.{key} = {value}")


def _load_from_dict(cfg: Config, data: Dict) -> None:
    """
    Load configuration values from a nested dictionary.

    Only fields that exist on the section dataclasses are applied; unknown
    sections and keys are ignored.

    :param cfg: Configuration instance to update.
    :param data: Nested dictionary with configuration values.
    """
    for section in ("logging", "scheduler", "enrich"):
        if section not in data or not isinstance(data[section], dict):
            continue
        section_obj = getattr(cfg, section)
        for k, v in data[section].items():
            if hasattr(section_obj, k):
                setattr(section_obj, k, v)

def load_config(config_path: Path = None) -> Config:
    """
    Load configuration from file and environment variables.

    Resets to defaults, applies the YAML file if it exists, then applies
    environment overrides. Updates the global config instance.

    :param config_path: Optional path to config file (default: ~/.shardwise/config.yaml).
    :return: Updated global configuration instance.
    """
    global config

    config = Config()

    path = config_path or CONFIG_FILE
    if path.exists():
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            _load_from_dict(config, data)
            log.debug(f"Loaded config from {path}")
        except (OSError, yaml.YAMLError) as e:
            # Fall back to defaults + env vars
            log.warning(f"Failed to load config from {path}: {e}")

    _apply_env_vars(config)
    return config

def init_config_file() -> None:
    """
    Create default configuration file if it doesn't exist.
    """
    if not CONFIG_FILE.exists():
        config.save(CONFIG_FILE)
        log.info(f"Created default config at {CONFIG_FILE}")

def get_config() -> Config:
    """
    Get the global configuration instance.

    :return: Global configuration instance.
    """
    return config
