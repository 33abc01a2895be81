"""
Pytest configuration and shared fixtures for shardwise tests.

This module provides:
- Custom markers for test categorization
- Shared fixtures for test isolation
- A small spec file tree and suite factory for scheduler tests
"""

import shutil
import tempfile
from pathlib import Path

import pytest


# =============================================================================
# Pytest Hooks and Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests"
    )


# =============================================================================
# Directory and Path Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files.

    Yields:
        Path: Resolved path to temporary directory, cleaned up after test.
    """
    tmpdir = tempfile.mkdtemp(prefix="shardwise_test_")
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def temp_config_dir(temp_dir, monkeypatch):
    """Create a temporary config directory and point the config file at it.

    Yields:
        Path: Path to .shardwise config directory
    """
    config_dir = temp_dir / ".shardwise"
    config_dir.mkdir(parents=True)

    monkeypatch.setenv("HOME", str(temp_dir))
    monkeypatch.setattr("shardwise.utils.config.CONFIG_DIR", config_dir)
    monkeypatch.setattr("shardwise.utils.config.CONFIG_FILE", config_dir / "config.yaml")

    yield config_dir


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def fresh_global_config(monkeypatch):
    """Give every test its own default global config."""
    from shardwise.utils.config import Config
    monkeypatch.setattr("shardwise.utils.config.config", Config())
    for var in ("SHARDWISE_LOG_LEVEL", "SHARDWISE_LOG_FILE",
                "SHARDWISE_MAX_SESSIONS", "SHARDWISE_DOWNLOAD_DIR"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def default_config():
    """Get a fresh default config instance.

    Returns:
        Config: Default configuration object
    """
    from shardwise.utils.config import Config
    return Config()


@pytest.fixture
def config_file(temp_config_dir):
    """Create a test config file.

    Returns:
        Path: Path to created config file
    """
    config_path = temp_config_dir / "config.yaml"
    config_content = """
logging:
  level: DEBUG
  verbose: true

scheduler:
  max_sessions: 6

enrich:
  download_dir: /var/downloads
"""
    config_path.write_text(config_content)
    return config_path


# =============================================================================
# Suite Fixtures
# =============================================================================

@pytest.fixture
def spec_tree(temp_dir):
    """Create a small tree of spec files.

    Layout:
        specs/a_spec.js, specs/b_spec.js, specs/c_spec.js,
        specs/nested/d_spec.js, specs/legacy/old_spec.js,
        extra/e_spec.js

    Returns:
        Path: Root directory holding the tree
    """
    files = [
        "specs/a_spec.js",
        "specs/b_spec.js",
        "specs/c_spec.js",
        "specs/nested/d_spec.js",
        "specs/legacy/old_spec.js",
        "extra/e_spec.js",
    ]
    for name in files:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("// spec\n")
    return temp_dir


@pytest.fixture
def make_suite(spec_tree):
    """Factory for suite configurations rooted at spec_tree.

    Returns:
        Callable: make_suite(capabilities, specs=["specs/*_spec.js"], **kwargs)
    """
    from shardwise.suite import SuiteConfig

    def _make(capabilities, specs=None, **kwargs):
        return SuiteConfig(
            specs=["specs/*_spec.js"] if specs is None else specs,
            capabilities=capabilities,
            config_dir=spec_tree,
            **kwargs,
        )

    return _make
