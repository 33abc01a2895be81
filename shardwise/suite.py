"""
Suite configuration.

A suite file describes what to run: global spec patterns (or named suites),
global exclusions, and the list of capabilities to run them under. Each
capability is kept as a plain dict; the scheduler reads the keys it knows
(max_instances, count, shard_test_files, specs, exclude, browser_name) and
passes everything else through to the task untouched.

Example suite file:

    specs:
      - specs/**/*_spec.js
    exclude:
      - specs/legacy/*
    max_sessions: 4
    capabilities:
      - browser_name: chrome
        max_instances: 2
        shard_test_files: true
      - browser_name: firefox
        exclude:
          - specs/chrome_only/*
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass, field

from shardwise.errors import ConfigError
from shardwise.utils.logging import get_logger
from shardwise.utils.patterns import unique

log = get_logger("suite")

def _as_list(value: Any) -> List[str]:
    """Wrap a lone pattern string in a list; pass lists through."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)

@dataclass
class SuiteConfig:
    """
    Parsed suite file.
    """
    specs: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    # Named groups of spec patterns, selected with `suite`
    suites: Dict[str, Union[str, List[str]]] = field(default_factory=dict)
    # Comma separated suite names to run instead of `specs`
    suite: Optional[str] = None
    capabilities: List[Dict[str, Any]] = field(default_factory=list)
    # Reported concurrency ceiling (0 = derive from the queues)
    max_sessions: int = 0
    # Directory spec patterns are relative to
    config_dir: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], config_dir: Optional[Path] = None) -> "SuiteConfig":
        """
        Build a suite configuration from a parsed YAML mapping.

        A single capability mapping is accepted in place of a list.

        :param data: Mapping loaded from a suite file.
        :param config_dir: Base directory for pattern resolution (default: cwd).
        :return: SuiteConfig instance.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Suite configuration must be a mapping, got {type(data).__name__}")

        capabilities = data.get("capabilities") or []
        if isinstance(capabilities, dict):
            capabilities = [capabilities]
        if not isinstance(capabilities, list):
            raise ConfigError("capabilities must be a list of mappings")

        suites = data.get("suites") or {}
        if not isinstance(suites, dict):
            raise ConfigError("suites must map suite names to spec patterns")

        suite = data.get("suite")
        if suite is not None and not isinstance(suite, str):
            raise ConfigError(f"suite must be a comma separated string of suite names, got {suite!r}")

        max_sessions = data.get("max_sessions") or 0
        if isinstance(max_sessions, bool):
            raise ConfigError(f"max_sessions must be an integer, got {max_sessions!r}")
        try:
            max_sessions = int(max_sessions)
        except (TypeError, ValueError):
            raise ConfigError(f"max_sessions must be an integer, got {max_sessions!r}")

        return cls(
            specs=_as_list(data.get("specs")),
            exclude=_as_list(data.get("exclude")),
            suites=dict(suites),
            suite=suite,
            capabilities=list(capabilities),
            max_sessions=max_sessions,
            config_dir=Path(config_dir) if config_dir else Path.cwd(),
        )

    def validate(self) -> None:
        """
        Check the configuration can build a scheduler.

        :raises ConfigError: If there are no capabilities, an entry is not a
                             mapping, browser_name is not a string, or a
                             limit is not a positive integer.
        """
        if self.suite is not None and not isinstance(self.suite, str):
            raise ConfigError(f"suite must be a comma separated string of suite names, got {self.suite!r}")
        if not self.capabilities:
            raise ConfigError("At least one capability must be configured")

        for position, capability in enumerate(self.capabilities, start=1):
            if not isinstance(capability, dict):
                raise ConfigError(f"Capability #{position} must be a mapping")
            browser_name = capability.get("browser_name")
            if browser_name is not None and not isinstance(browser_name, str):
                raise ConfigError(
                    f"Capability #{position}: browser_name must be a string, got {browser_name!r}"
                )
            for key in ("max_instances", "count"):
                value = capability.get(key)
                if value is None:
                    continue
                if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                    raise ConfigError(
                        f"Capability #{position}: {key} must be a positive integer, got {value!r}"
                    )

def get_specs(suite_config: SuiteConfig) -> List[str]:
    """
    Select the spec patterns to run.

    A selected `suite` wins over `specs`; with neither set, every named
    suite is run.

    :param suite_config: Suite configuration.
    :return: Spec patterns, duplicates removed.
    :raises ConfigError: If a selected suite name is not defined.
    """
    if suite_config.suite:
        patterns = []
        for name in suite_config.suite.split(","):
            name = name.strip()
            if name not in suite_config.suites:
                raise ConfigError(f"Unknown test suite: {name}")
            patterns.extend(_as_list(suite_config.suites[name]))
        return unique(patterns)

    if suite_config.specs:
        return list(suite_config.specs)

    patterns = []
    for suite_patterns in suite_config.suites.values():
        patterns.extend(_as_list(suite_patterns))
    return unique(patterns)

def load_suite(path: Path) -> SuiteConfig:
    """
    Load a suite file.

    Patterns in the file are resolved relative to the file's directory.

    :param path: Path to a YAML suite file.
    :return: SuiteConfig instance.
    :raises ConfigError: If the file is missing or not valid YAML.
    """
    path = Path(path).expanduser()
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"Suite file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid suite file {path}: {e}") from e

    log.debug(f"Loaded suite from {path}")
    return SuiteConfig.from_dict(data, config_dir=path.resolve().parent)
