"""
Configuration file loading.

Supports JSON (.json) and YAML (.yaml, .yml) files. Every file becomes a
FileDataSource. YAML files additionally remember the line and column of each
key, so error messages can point into the file.

File discovery searches, in order, for every variant and then for the base
name::

    <directory>/<name>.<variant>.json
    <directory>/<name>.<variant>.yaml
    <directory>/<name>.<variant>.yml
    <directory>/<name>.json
    <directory>/<name>.yaml
    <directory>/<name>.yml

and returns one source per existing file, in that order. Earlier files take
precedence when the sources are combined.
"""

from __future__ import annotations

import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import yaml as _yaml

import confschema.constants as constants
import confschema.errors as errors
import confschema.keys as keys
import confschema.sources as sources

_logger = _logging.getLogger(__name__)

# Maps key paths to (line, column) tuples.
# Line and column numbers are 1-indexed to match editor conventions.
LineRegistry = dict[tuple[keys.Segment, ...], tuple[int, int]]


class _LineTrackingLoader(_yaml.SafeLoader):
    """YAML loader that tracks line/column numbers for all keys and items.

    Mapping and sequence construction is intercepted to record the position
    of each key and list item, while the actual value construction is left to
    the parent class so scalars keep their YAML types (int, bool, etc.).
    """

    def __init__(self, stream: _typing.Any) -> None:
        super().__init__(stream)
        self.line_registry: LineRegistry = {}
        self._path_stack: list[keys.Segment] = []

    def _record(self, node: _yaml.Node) -> None:
        self.line_registry[tuple(self._path_stack)] = (
            node.start_mark.line + 1,
            node.start_mark.column + 1,
        )

    def construct_mapping(
        self, node: _yaml.MappingNode, deep: bool = False
    ) -> dict[_typing.Any, _typing.Any]:
        """Override to track line numbers for each key."""
        if not self._path_stack:
            self._record(node)

        # Resolve "<<" merge keys like SafeConstructor does.
        self.flatten_mapping(node)

        result: dict[_typing.Any, _typing.Any] = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=True)

            self._path_stack.append(str(key))
            self._record(key_node)
            # deep=True so nested collections are built while the path stack
            # still holds this key.
            result[key] = self.construct_object(value_node, deep=True)
            self._path_stack.pop()

        return result

    def construct_sequence(
        self, node: _yaml.SequenceNode, deep: bool = False
    ) -> list[_typing.Any]:
        """Override to track line numbers for each list item."""
        result: list[_typing.Any] = []
        for index, item_node in enumerate(node.value):
            self._path_stack.append(index)
            self._record(item_node)
            result.append(self.construct_object(item_node, deep=True))
            self._path_stack.pop()
        return result


def _load_yaml_with_lines(content: str) -> tuple[_typing.Any, LineRegistry]:
    """
    Load YAML content and track line numbers for all keys.

    Returns:
        Tuple of (parsed_data, line_registry).

    Raises:
        yaml.YAMLError: If YAML is malformed.
    """
    loader = _LineTrackingLoader(content)
    try:
        data = loader.get_single_data()
    finally:
        loader.dispose()
    return data, loader.line_registry


class FileDataSource(sources.DataSource):
    """
    A DataSource loaded from a configuration file.

    Args:
        data: The parsed top-level mapping.
        path: The file the data was read from.
        line_registry: Positions of keys in the file, if known.
    """

    def __init__(
        self,
        data: _typing.Mapping[_typing.Any, _typing.Any],
        path: _pathlib.Path,
        line_registry: LineRegistry | None = None,
    ) -> None:
        super().__init__(data, description=str(path))
        self.path = path
        self._line_registry: LineRegistry = dict(line_registry or {})

    def get_line_info(self, key: keys.ConfigurationKey) -> tuple[int, int] | None:
        """Return the (line, column) of ``key`` in the file, if known."""
        return self._line_registry.get(key.path)

    def describe_key(self, key: keys.ConfigurationKey) -> str:
        position = self.get_line_info(key)
        if position is None:
            return str(key)
        line, column = position
        return f"{key} (line {line}, column {column})"


def _read_text(path: _pathlib.Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise errors.ConfigurationError(f'Cannot read file "{path}": {e}') from e


def _type_name(value: object) -> str:
    return "null" if value is None else type(value).__name__


def load_json_configuration_file(file_path: str | _os.PathLike[str]) -> FileDataSource:
    """
    Load a JSON configuration file.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid JSON, or
            its top-level value is not an object.
    """
    path = _pathlib.Path(file_path).resolve()
    try:
        parsed = _json.loads(_read_text(path))
    except _json.JSONDecodeError as e:
        raise errors.ConfigurationError(
            f'Failed to parse file "{path}" as JSON: {e.msg} '
            f"(line {e.lineno}, column {e.colno})"
        ) from e

    if not isinstance(parsed, dict):
        raise errors.ConfigurationError(
            f'Expected top level JSON value in file "{path}" to be an object, '
            f"but got {_type_name(parsed)}."
        )

    _logger.debug("Loaded JSON configuration file %s", path)
    return FileDataSource(parsed, path)


def load_yaml_configuration_file(file_path: str | _os.PathLike[str]) -> FileDataSource:
    """
    Load a YAML configuration file.

    An empty document is treated as an empty mapping.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML, or
            its top-level value is not a mapping.
    """
    path = _pathlib.Path(file_path).resolve()
    try:
        parsed, line_registry = _load_yaml_with_lines(_read_text(path))
    except _yaml.YAMLError as e:
        raise errors.ConfigurationError(f'Failed to parse file "{path}" as YAML: {e}') from e

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, dict):
        raise errors.ConfigurationError(
            f'Expected top level YAML value in file "{path}" to be a mapping, '
            f"but got {_type_name(parsed)}."
        )

    _logger.debug("Loaded YAML configuration file %s", path)
    return FileDataSource(parsed, path, line_registry)


_LOADERS: dict[str, _typing.Callable[[_pathlib.Path], FileDataSource]] = {
    ".json": load_json_configuration_file,
    ".yaml": load_yaml_configuration_file,
    ".yml": load_yaml_configuration_file,
}


def load_configuration_file(file_path: str | _os.PathLike[str]) -> FileDataSource:
    """
    Load a configuration file, choosing the format by extension.

    Raises:
        ConfigurationError: If the extension is not supported or the file
            cannot be loaded.
    """
    path = _pathlib.Path(file_path)
    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        raise errors.ConfigurationError(
            f'Unsupported configuration file extension: "{path.resolve()}".'
        )
    return loader(path)


def configuration_file_candidates(
    directory: str | _os.PathLike[str],
    config_name: str,
    variants: _typing.Iterable[str] | None = None,
) -> list[_pathlib.Path]:
    """Return every path searched for configuration files, in search order."""
    base_path = _pathlib.Path(directory)
    stems = [f"{config_name}.{variant}" for variant in variants or ()]
    stems.append(config_name)
    return [
        base_path / f"{stem}.{extension}"
        for stem in stems
        for extension in constants.CONFIGURATION_FILE_EXTENSIONS
    ]


def load_configuration_files(
    directory: str | _os.PathLike[str],
    config_name: str,
    variants: _typing.Iterable[str] | None = None,
) -> list[FileDataSource]:
    """
    Load every existing configuration file for ``config_name``.

    Args:
        directory: The directory to search.
        config_name: The base name of the files, e.g. "application".
        variants: Variant names, e.g. active profiles, most specific first.

    Returns:
        One source per existing file, in search order.

    Raises:
        ConfigurationError: If an existing file cannot be loaded.
    """
    loaded: list[FileDataSource] = []
    for candidate in configuration_file_candidates(directory, config_name, variants):
        if not candidate.is_file():
            continue
        loaded.append(load_configuration_file(candidate))
    _logger.debug(
        "Found %d configuration file(s) for %r in %s", len(loaded), config_name, directory
    )
    return loaded
