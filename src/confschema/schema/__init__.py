"""
Configuration schemas.

A schema is a tree of nodes describing the typed shape of a configuration.
Loading a schema from a source yields the typed value or every error found.
"""

from confschema.schema.base import ConfigurationSchemaNode, LoadResult, SingleChildSchemaNode
from confschema.schema.composite import ConfList, ConfObject, ConfProperty, ObjectFactory
from confschema.schema.scalars import (
    ConfBoolean,
    ConfDateTime,
    ConfDouble,
    ConfEnum,
    ConfInteger,
    ConfInternetAddress,
    ConfNumber,
    ConfScalar,
    ConfString,
    ConfUri,
    FunctionConfScalar,
)
from confschema.schema.wrappers import ConfDefault, ConfNullable, ConfRebase

__all__ = [
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
    "ConfProperty",
    "ConfRebase",
    "ConfScalar",
    "ConfString",
    "ConfUri",
    "ConfigurationSchemaNode",
    "FunctionConfScalar",
    "LoadResult",
    "ObjectFactory",
    "SingleChildSchemaNode",
]
