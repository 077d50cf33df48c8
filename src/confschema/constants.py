"""
Shared constants for confschema.

This module provides a single source of truth for names and default values
that are used across multiple modules.
"""

# Key addressing
KEY_SEPARATOR = "."
"""Separator between string segments in the canonical form of a key."""

ENVIRONMENT_SEPARATOR = "_"
"""Separator between segments in environment variable names."""

COMMAND_LINE_PREFIX = "--"
"""Prefix that marks a command line token as a flag."""

# Reserved keys
JSON_CONF_KEY_PATH: tuple[str, ...] = ("conf", "json")
"""Key holding a JSON-encoded object with additional configuration.

Read as ``--conf.json`` from the command line and ``CONF_JSON`` from the
environment.
"""

PROFILES_PROPERTY = "profiles"
"""Key holding the comma-separated list of active profile names."""

# Configuration files
DEFAULT_CONFIG_DIRECTORY = "config"
"""Directory searched for application configuration files."""

DEFAULT_CONFIG_NAME = "application"
"""Base name of application configuration files."""

CONFIGURATION_FILE_EXTENSIONS: tuple[str, ...] = ("json", "yaml", "yml")
"""Supported configuration file extensions, in search order."""

ENV_CONFIG_DIR = "CONFSCHEMA_CONFIG_DIR"
"""Environment variable overriding DEFAULT_CONFIG_DIRECTORY."""
