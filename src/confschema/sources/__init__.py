"""
Configuration sources.

Every backend answers the same three questions for a ConfigurationKey: is
there a value, what is it, and how would a human refer to it.
"""

from confschema.sources.base import ConfigurationSource
from confschema.sources.combining import CombiningSource
from confschema.sources.command_line import CommandLineSource
from confschema.sources.data import DataSource
from confschema.sources.environment import EnvironmentSource
from confschema.sources.json_conf import JSON_CONF_KEY, load_json_conf

__all__ = [
    "JSON_CONF_KEY",
    "CombiningSource",
    "CommandLineSource",
    "ConfigurationSource",
    "DataSource",
    "EnvironmentSource",
    "load_json_conf",
]
