"""
Schema nodes that wrap a single child: optional values, defaults and key
rebasing.
"""

from __future__ import annotations

import typing as _typing

import confschema.keys as keys
import confschema.schema.base as schema_base
import confschema.sources as sources

T = _typing.TypeVar("T")


class ConfNullable(schema_base.SingleChildSchemaNode[T, T | None]):
    """
    Loads the child's value if the source contains the key, None otherwise.

    The child is not consulted at all when the key is absent, so a missing
    optional value never produces errors.
    """

    async def load_result(
        self,
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None = None,
    ) -> schema_base.LoadResult[T | None]:
        key = self._require_key(key)
        if not source.contains(key):
            return schema_base.LoadResult.success(None)
        result = await self.child.load_result(source, key)
        return _typing.cast(schema_base.LoadResult[T | None], result)

    def __repr__(self) -> str:
        return f"ConfNullable({self.child!r})"


class ConfDefault(schema_base.SingleChildSchemaNode[T, T]):
    """
    Loads the child's value if the source contains the key, ``default``
    otherwise.

    Args:
        child: The node loading the value when present.
        default: The value used when the key is absent.
    """

    def __init__(self, child: schema_base.ConfigurationSchemaNode[T], *, default: T) -> None:
        super().__init__(child)
        self.default = default

    async def load_result(
        self,
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None = None,
    ) -> schema_base.LoadResult[T]:
        key = self._require_key(key)
        if not source.contains(key):
            return schema_base.LoadResult.success(self.default)
        return await self.child.load_result(source, key)

    def __repr__(self) -> str:
        return f"ConfDefault({self.child!r}, default={self.default!r})"


class ConfRebase(schema_base.SingleChildSchemaNode[T, T]):
    """
    Loads the child at ``key + base``, or at ``base`` when loaded without a
    key.

    Used to project a child into a named sub-path, or to root a whole schema
    at an application-wide prefix.

    Args:
        base: The key appended to the incoming key.
        child: The node to load.
    """

    def __init__(
        self,
        base: keys.ConfigurationKey,
        child: schema_base.ConfigurationSchemaNode[T],
    ) -> None:
        super().__init__(child)
        self.base = base

    async def load_result(
        self,
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None = None,
    ) -> schema_base.LoadResult[T]:
        child_key = self.base if key is None else key + self.base
        return await self.child.load_result(source, child_key)

    def __repr__(self) -> str:
        return f"ConfRebase({self.base!r}, {self.child!r})"
