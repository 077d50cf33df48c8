"""
Composite schema nodes: lists and objects.

Both fan out to their children concurrently and join on all of them before
combining the results. Errors from every failing child are reported, in
declaration (object) or index (list) order.
"""

from __future__ import annotations

import asyncio as _asyncio
import collections.abc as _abc
import typing as _typing

import pydantic as _pydantic

import confschema.errors as errors
import confschema.keys as keys
import confschema.schema.base as schema_base
import confschema.schema.wrappers as wrappers
import confschema.sources as sources

T = _typing.TypeVar("T")

ObjectFactory = _typing.Callable[[dict[str, _typing.Any]], T]
"""Creates the value of a ConfObject from its property name to value map."""


class ConfList(schema_base.SingleChildSchemaNode[T, list[T]]):
    """
    Loads a list whose elements are all loaded by the same child node.

    The length is implicit: elements are looked up at ``key[0]``, ``key[1]``,
    ... and the list ends at the first index the source does not contain.
    """

    async def load_result(
        self,
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None = None,
    ) -> schema_base.LoadResult[list[T]]:
        key = self._require_key(key)
        results = await _asyncio.gather(
            *(self.child.load_result(source, element) for element in _element_keys(source, key))
        )

        found: list[errors.ConfigurationError] = []
        values: list[T] = []
        for result in results:
            if result.has_errors:
                found.extend(result.errors)
            else:
                values.append(_typing.cast(T, result.value))

        if found:
            return schema_base.LoadResult.failure(found)
        return schema_base.LoadResult.success(values)

    def __repr__(self) -> str:
        return f"ConfList({self.child!r})"


def _element_keys(
    source: sources.ConfigurationSource,
    key: keys.ConfigurationKey,
) -> _typing.Iterator[keys.ConfigurationKey]:
    index = 0
    while source.contains(element := key + index):
        yield element
        index += 1


class ConfProperty(wrappers.ConfRebase[T]):
    """
    Loads one named property of a ConfObject.

    Args:
        name: The property name, used both as the key segment and as the
            name in the map passed to the object factory.
        child: The node loading the property value.
    """

    def __init__(self, name: str, child: schema_base.ConfigurationSchemaNode[T]) -> None:
        super().__init__(keys.ConfigurationKey([name]), child)
        self.name = name

    def __repr__(self) -> str:
        return f"ConfProperty({self.name!r}, {self.child!r})"


class ConfObject(schema_base.ConfigurationSchemaNode[T]):
    """
    Loads an object by composing the values of named properties.

    Every property is loaded, even after another one failed. If all succeed,
    ``factory`` is called with a property name to value map; otherwise the
    errors of every failing property are returned and the factory is not
    called.

    The factory may be a pydantic model's ``model_validate``: validation
    errors it raises are reported at the key of the offending field. Any
    other ValueError is reported at the object key; other exceptions
    propagate.

    Args:
        properties: Property name to node, or ConfProperty instances.
        factory: Builds the object value from the loaded properties.

    Raises:
        DuplicatePropertyError: If two properties share a name.
    """

    def __init__(
        self,
        properties: (
            _typing.Mapping[str, schema_base.ConfigurationSchemaNode[_typing.Any]]
            | _typing.Iterable[ConfProperty[_typing.Any]]
        ),
        factory: ObjectFactory[T],
    ) -> None:
        super().__init__()
        if isinstance(properties, _abc.Mapping):
            properties = [ConfProperty(name, node) for name, node in properties.items()]
        for prop in properties:
            self._add_property(prop)
        self._factory = factory

    @property
    def properties(self) -> tuple[ConfProperty[_typing.Any], ...]:
        """The properties of this object, in declaration order."""
        return _typing.cast(tuple[ConfProperty[_typing.Any], ...], self.children)

    def _add_property(self, prop: ConfProperty[_typing.Any]) -> None:
        if not isinstance(prop, ConfProperty):
            raise TypeError(f"Expected a ConfProperty, got {type(prop).__name__}")
        if any(existing.name == prop.name for existing in self.properties):
            raise errors.DuplicatePropertyError(
                f"Object properties must have unique names: {prop.name!r}"
            )
        self._attach(prop)

    async def load_result(
        self,
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None = None,
    ) -> schema_base.LoadResult[T]:
        properties = self.properties
        results = await _asyncio.gather(*(prop.load_result(source, key) for prop in properties))

        found: list[errors.ConfigurationError] = []
        values: dict[str, _typing.Any] = {}
        for prop, result in zip(properties, results):
            if result.has_errors:
                found.extend(result.errors)
            else:
                values[prop.name] = result.value

        if found:
            return schema_base.LoadResult.failure(found)
        return self._build(values, source, key)

    def _build(
        self,
        values: dict[str, _typing.Any],
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None,
    ) -> schema_base.LoadResult[T]:
        try:
            return schema_base.LoadResult.success(self._factory(values))
        except _pydantic.ValidationError as e:
            return schema_base.LoadResult.failure(
                _validation_error(detail, source, key) for detail in e.errors()
            )
        except ValueError as e:
            return schema_base.LoadResult.failure(
                [errors.ConfigurationError(str(e), source=source, key=key)]
            )

    def __repr__(self) -> str:
        names = ", ".join(prop.name for prop in self.properties)
        return f"ConfObject({names})"


def _validation_error(
    detail: _typing.Any,
    source: sources.ConfigurationSource,
    key: keys.ConfigurationKey | None,
) -> errors.ConfigurationError:
    """Convert one pydantic error detail into an error at the field's key."""
    location = tuple(detail.get("loc", ()))
    message = str(detail.get("msg", "Invalid value"))
    if not location:
        return errors.ConfigurationError(message, source=source, key=key)
    try:
        field_key = keys.ConfigurationKey(location)
    except keys.InvalidKeyError:
        dotted = ".".join(str(part) for part in location)
        return errors.ConfigurationError(f"{dotted}: {message}", source=source, key=key)
    return errors.ConfigurationError(
        message,
        source=source,
        key=field_key if key is None else key + field_key,
    )
