"""
Shared pytest fixtures for confschema tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import enum as _enum
import os as _os
import pathlib as _pathlib
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import confschema.constants as constants
import confschema.keys as keys
import confschema.sources as sources

# Environment variables that change how confschema resolves sources.
ENV_KEYS_TO_CLEAR = [
    constants.ENV_CONFIG_DIR,
    "CONF_JSON",
    "PROFILES",
]


class Profile(_enum.Enum):
    """Profiles used throughout the tests."""

    dev = "dev"
    prod = "prod"
    test = "test"


def key(*segments: keys.Segment) -> keys.ConfigurationKey:
    """Shorthand for building keys in tests."""
    return keys.ConfigurationKey(segments)


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """
    Return environment dict with confschema-related keys removed.

    Use with mock.patch.dict to isolate tests from the actual environment.
    """
    return {k: v for k, v in _os.environ.items() if k not in ENV_KEYS_TO_CLEAR}


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]):
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                source = sources.EnvironmentSource.from_environment()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def make_source() -> _typing.Callable[..., sources.DataSource]:
    """Factory for in-memory DataSources."""

    def _make(data: dict[str, _typing.Any], description: str = "test data") -> sources.DataSource:
        return sources.DataSource(data, description=description)

    return _make


@_pytest.fixture
def config_dir(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """
    An empty configuration directory.

    Write files into it with write_config().
    """
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


def write_config(directory: _pathlib.Path, name: str, content: str) -> _pathlib.Path:
    """Write a configuration file and return its path."""
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path
