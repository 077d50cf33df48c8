"""
CLI module for confschema.

Provides the command-line interface using Click.
"""

from confschema.cli.main import cli, main

__all__ = ["main", "cli"]
