"""
Opinionated assembly of configuration sources for applications.

Sources are combined in the following order (highest precedence first):

1. ``--conf.json`` command line argument
2. Command line arguments
3. ``CONF_JSON`` environment variable
4. Environment variables
5. Configuration files in the configuration directory (``config`` unless
   ``CONFSCHEMA_CONFIG_DIR`` is set):

   1. For each active profile, in alphabetical order:
      ``application.<profile>.json``, ``.yaml``, ``.yml``
   2. The base configuration: ``application.json``, ``.yaml``, ``.yml``

The active profiles are read from the dynamic sources (1-4) before the files
are searched for, and are returned to the caller alongside the combined source.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import confschema.constants as constants
import confschema.files as files
import confschema.profiles as profiles
import confschema.sources as sources

_logger = _logging.getLogger(__name__)

P = _typing.TypeVar("P", bound=_enum.Enum)


@_dataclasses.dataclass(frozen=True)
class AppSources(_typing.Generic[P]):
    """The assembled application configuration sources."""

    source: sources.CombiningSource
    """All sources combined, highest precedence first."""

    profiles: profiles.Profiles[P]
    """The active profiles that selected the configuration files."""


def resolve_config_directory(
    environment: _typing.Mapping[str, str] | None = None,
    directory: str | _os.PathLike[str] | None = None,
) -> _pathlib.Path:
    """
    Determine the configuration directory.

    Priority:
    1. ``directory`` if given
    2. ``CONFSCHEMA_CONFIG_DIR`` in ``environment`` (or the process
       environment when ``environment`` is None)
    3. ``config`` relative to the working directory
    """
    if directory is not None:
        return _pathlib.Path(directory)
    env = _os.environ if environment is None else environment
    if override := env.get(constants.ENV_CONFIG_DIR):
        return _pathlib.Path(override)
    return _pathlib.Path(constants.DEFAULT_CONFIG_DIRECTORY)


def add_dynamic_sources(
    combining: sources.CombiningSource,
    *,
    arguments: _typing.Sequence[str] | None = None,
    environment: _typing.Mapping[str, str] | None = None,
) -> None:
    """
    Add command line and environment sources to ``combining``.

    Args:
        combining: The source to extend.
        arguments: Command line arguments. None skips the command line.
        environment: Environment variables. None reads the process
            environment.

    Raises:
        ConfigurationError: If a ``conf.json`` value is not a JSON object.
    """
    command_line = sources.CommandLineSource(arguments) if arguments is not None else None
    env_source = (
        sources.EnvironmentSource(environment)
        if environment is not None
        else sources.EnvironmentSource.from_environment()
    )

    command_line_json = command_line.load_json_conf() if command_line is not None else None
    environment_json = env_source.load_json_conf()

    for source in (command_line_json, command_line, environment_json, env_source):
        if source is not None:
            _logger.debug("Adding configuration source: %s", source.description)
            combining.add(source)


def add_static_sources(
    combining: sources.CombiningSource,
    profile_names: _typing.Iterable[str],
    *,
    directory: str | _os.PathLike[str] | None = None,
    config_name: str = constants.DEFAULT_CONFIG_NAME,
    environment: _typing.Mapping[str, str] | None = None,
) -> None:
    """
    Add configuration files to ``combining``.

    Args:
        combining: The source to extend.
        profile_names: Active profile names; sorted before probing.
        directory: The configuration directory. See resolve_config_directory().
        config_name: The base name of the configuration files.
        environment: Environment used to resolve the directory.

    Raises:
        ConfigurationError: If an existing file cannot be loaded.
    """
    config_directory = resolve_config_directory(environment, directory)
    combining.add_all(
        files.load_configuration_files(
            config_directory,
            config_name,
            variants=sorted(profile_names),
        )
    )


async def load_app_sources(
    all_profiles: type[P] | _typing.Iterable[P],
    *,
    arguments: _typing.Sequence[str] | None = None,
    environment: _typing.Mapping[str, str] | None = None,
    default_profiles: _typing.Iterable[P] = (),
    additional_profiles: _typing.Iterable[P] | None = None,
    directory: str | _os.PathLike[str] | None = None,
    config_name: str = constants.DEFAULT_CONFIG_NAME,
) -> AppSources[P]:
    """
    Load the configuration sources of an application.

    Args:
        all_profiles: Every profile the application knows.
        arguments: Command line arguments (usually ``sys.argv[1:]``).
        environment: Environment variables. None reads the process
            environment.
        default_profiles: Active when no ``profiles`` value is configured.
        additional_profiles: Always active, e.g. ``{Profile.test}`` in tests.
        directory: The configuration directory. See resolve_config_directory().
        config_name: The base name of the configuration files.

    Returns:
        The combined source and the active profiles.

    Raises:
        ConfigurationError: If a JSON blob or configuration file is invalid.
        ConfigurationException: If the ``profiles`` value is invalid.
    """
    combining = sources.CombiningSource()
    add_dynamic_sources(combining, arguments=arguments, environment=environment)
    active = await profiles.load_profiles(
        combining,
        all_profiles,
        default_profiles=default_profiles,
        additional_profiles=additional_profiles,
    )
    add_static_sources(
        combining,
        active.names,
        directory=directory,
        config_name=config_name,
        environment=environment,
    )
    return AppSources(source=combining, profiles=active)
