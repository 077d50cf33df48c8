"""
confschema - typed, layered application configuration.

Describe the shape of a configuration once as a schema tree, then load it
from any combination of command line arguments, environment variables,
JSON blobs and configuration files. Every error is reported, not just the
first one.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("confschema")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from confschema.app_sources import AppSources, load_app_sources  # noqa: E402
from confschema.errors import (  # noqa: E402
    ConfigurationError,
    ConfigurationException,
    DuplicatePropertyError,
    NodeAlreadyAttachedError,
    SchemaStructureError,
)
from confschema.files import FileDataSource, load_configuration_file  # noqa: E402
from confschema.keys import ConfigurationKey, InvalidKeyError  # noqa: E402
from confschema.profiles import ConfProfiles, Profiles, load_profiles  # noqa: E402
from confschema.schema import (  # noqa: E402
    ConfBoolean,
    ConfDateTime,
    ConfDefault,
    ConfDouble,
    ConfEnum,
    ConfigurationSchemaNode,
    ConfInteger,
    ConfInternetAddress,
    ConfList,
    ConfNullable,
    ConfNumber,
    ConfObject,
    ConfProperty,
    ConfRebase,
    ConfScalar,
    ConfString,
    ConfUri,
    FunctionConfScalar,
    LoadResult,
)
from confschema.sources import (  # noqa: E402
    CombiningSource,
    CommandLineSource,
    ConfigurationSource,
    DataSource,
    EnvironmentSource,
)

__all__ = [
    "__version__",
    "__version_info__",
    "AppSources",
    "CombiningSource",
    "CommandLineSource",
    "ConfBoolean",
    "ConfDateTime",
    "ConfDefault",
    "ConfDouble",
    "ConfEnum",
    "ConfInteger",
    "ConfInternetAddress",
    "ConfList",
    "ConfNullable",
    "ConfNumber",
    "ConfObject",
    "ConfProfiles",
    "ConfProperty",
    "ConfRebase",
    "ConfScalar",
    "ConfString",
    "ConfUri",
    "ConfigurationError",
    "ConfigurationException",
    "ConfigurationKey",
    "ConfigurationSchemaNode",
    "ConfigurationSource",
    "DataSource",
    "DuplicatePropertyError",
    "EnvironmentSource",
    "FileDataSource",
    "FunctionConfScalar",
    "InvalidKeyError",
    "LoadResult",
    "NodeAlreadyAttachedError",
    "Profiles",
    "SchemaStructureError",
    "load_app_sources",
    "load_configuration_file",
    "load_profiles",
]
