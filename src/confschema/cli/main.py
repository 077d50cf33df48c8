"""
Main CLI entry point for confschema.

A small developer tool for inspecting application configuration: it
assembles the same sources an application would (command line, environment,
configuration files) and either prints one raw value or validates a schema.

Arguments meant for the application's own command line go after ``--``::

    confschema get database.url -- --database.url=postgres://localhost/db
"""

import asyncio as _asyncio
import importlib as _importlib
import logging as _logging
import os as _os
import sys as _sys
import typing as _typing

import click as _click

import confschema
import confschema.app_sources as app_sources
import confschema.constants as constants
import confschema.errors as errors
import confschema.keys as keys
import confschema.schema as schema
import confschema.sources as sources

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_F = _typing.TypeVar("_F", bound=_typing.Callable[..., _typing.Any])


def _source_options(command: _F) -> _F:
    """Options shared by every command that assembles sources."""
    options = [
        _click.option(
            "--config-dir",
            type=_click.Path(file_okay=False),
            default=None,
            help=f"Configuration directory (default: ${constants.ENV_CONFIG_DIR} or "
            f"'{constants.DEFAULT_CONFIG_DIRECTORY}')",
        ),
        _click.option(
            "--config-name",
            default=constants.DEFAULT_CONFIG_NAME,
            show_default=True,
            help="Base name of the configuration files",
        ),
        _click.option(
            "-P",
            "--profile",
            "profile_names",
            multiple=True,
            help="Active profile (repeatable). Defaults to the configured 'profiles' value.",
        ),
        _click.option(
            "--no-env",
            is_flag=True,
            help="Ignore the process environment",
        ),
        _click.argument("arguments", nargs=-1, type=_click.UNPROCESSED),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _profile_names_from(source: sources.ConfigurationSource) -> list[str]:
    """Read profile names from the ``profiles`` value, without validating them."""
    value = source.get(keys.ConfigurationKey([constants.PROFILES_PROPERTY]))
    if value is None:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


def _build_source(
    *,
    config_dir: str | None,
    config_name: str,
    profile_names: _typing.Sequence[str],
    no_env: bool,
    arguments: _typing.Sequence[str],
) -> sources.CombiningSource:
    """Assemble application sources, exiting on invalid source files."""
    environment: dict[str, str] = {} if no_env else dict(_os.environ)
    combining = sources.CombiningSource()
    try:
        app_sources.add_dynamic_sources(
            combining, arguments=list(arguments), environment=environment
        )
        app_sources.add_static_sources(
            combining,
            profile_names or _profile_names_from(combining),
            directory=config_dir,
            config_name=config_name,
            environment=environment,
        )
    except errors.ConfigurationError as e:
        _click.echo(f"Error: {e.description}", err=True)
        raise SystemExit(1) from None
    return combining


def _print_errors(found: _typing.Sequence[errors.ConfigurationError]) -> None:
    """Print errors as a numbered list on stderr."""
    import rich.console as _rich_console

    console = _rich_console.Console(stderr=True, highlight=False)
    noun = "error" if len(found) == 1 else "errors"
    console.print(
        f"[bold red]Configuration is invalid[/] ({len(found)} {noun}):", soft_wrap=True
    )
    for index, error in enumerate(found, 1):
        console.print(f"  {index}. {error.description}", markup=False, soft_wrap=True)


def _import_schema(reference: str) -> schema.ConfigurationSchemaNode[_typing.Any]:
    """Import a schema node from a ``module:attribute`` reference."""
    module_name, separator, attribute_path = reference.partition(":")
    if not separator or not module_name or not attribute_path:
        raise _click.BadParameter(
            f"{reference!r} is not of the form MODULE:ATTRIBUTE", param_hint="SCHEMA"
        )
    try:
        target: _typing.Any = _importlib.import_module(module_name)
    except ImportError as e:
        raise _click.BadParameter(
            f"Cannot import {module_name!r}: {e}", param_hint="SCHEMA"
        ) from e
    for attribute in attribute_path.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError:
            raise _click.BadParameter(
                f"{module_name!r} has no attribute {attribute_path!r}", param_hint="SCHEMA"
            ) from None
    if not isinstance(target, schema.ConfigurationSchemaNode):
        raise _click.BadParameter(
            f"{reference!r} is a {type(target).__name__}, not a schema node",
            param_hint="SCHEMA",
        )
    return target


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(confschema.__version__, "-v", "--version", prog_name="confschema")
@_click.option("--verbose", is_flag=True, help="Log which sources and files are loaded")
def cli(verbose: bool) -> None:
    """confschema - inspect and validate layered application configuration."""
    if verbose:
        _logging.basicConfig(
            level=_logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=_sys.stderr,
        )


@cli.command(name="get")
@_click.argument("key")
@_click.option("--where", is_flag=True, help="Also print where the value came from")
@_source_options
def get_command(
    key: str,
    where: bool,
    config_dir: str | None,
    config_name: str,
    profile_names: tuple[str, ...],
    no_env: bool,
    arguments: tuple[str, ...],
) -> None:
    """Print the raw value of KEY (e.g. database.url or servers[0].port)."""
    try:
        configuration_key = keys.ConfigurationKey.parse(key)
    except keys.InvalidKeyError as e:
        raise _click.BadParameter(str(e), param_hint="KEY") from None

    source = _build_source(
        config_dir=config_dir,
        config_name=config_name,
        profile_names=profile_names,
        no_env=no_env,
        arguments=arguments,
    )
    value = source.get(configuration_key)
    if value is None:
        if source.contains(configuration_key):
            _click.echo(f"{configuration_key} holds nested values, not a single value.", err=True)
        else:
            _click.echo(f"No value for {configuration_key}.", err=True)
        raise SystemExit(1)

    _click.echo(value)
    if where:
        _click.echo(f"(from {source.describe_key(configuration_key)})")


@cli.command(name="check")
@_click.argument("schema_reference", metavar="SCHEMA")
@_click.option(
    "--app-dir",
    type=_click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Directory added to the import path before importing SCHEMA",
)
@_click.option("--show", is_flag=True, help="Print the loaded value when valid")
@_source_options
def check_command(
    schema_reference: str,
    app_dir: str,
    show: bool,
    config_dir: str | None,
    config_name: str,
    profile_names: tuple[str, ...],
    no_env: bool,
    arguments: tuple[str, ...],
) -> None:
    """Load the schema node SCHEMA (module:attribute) and report every error."""
    app_path = _os.path.abspath(app_dir)
    if app_path not in _sys.path:
        _sys.path.insert(0, app_path)
    node = _import_schema(schema_reference)

    source = _build_source(
        config_dir=config_dir,
        config_name=config_name,
        profile_names=profile_names,
        no_env=no_env,
        arguments=arguments,
    )
    try:
        result = _asyncio.run(node.load_result(source))
    except ValueError as e:
        # Scalars, lists and optional wrappers cannot be loaded without a key.
        raise _click.BadParameter(str(e), param_hint="SCHEMA") from e
    if result.has_errors:
        _print_errors(result.errors)
        raise SystemExit(1)

    _click.echo("Configuration is valid.")
    if show:
        _click.echo(repr(result.value))


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="confschema")


if __name__ == "__main__":
    main()
