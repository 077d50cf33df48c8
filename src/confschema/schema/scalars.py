"""
Scalar schema nodes.

A scalar reads one string from the source and converts it into a typed
value. Conversion failures become configuration errors that quote the
offending input.
"""

from __future__ import annotations

import abc as _abc
import datetime as _datetime
import enum as _enum
import inspect as _inspect
import ipaddress as _ipaddress
import re as _re
import typing as _typing
import urllib.parse as _urllib_parse

import pydantic as _pydantic

import confschema.errors as errors
import confschema.keys as keys
import confschema.schema.base as base
import confschema.sources as sources

T = _typing.TypeVar("T")
E = _typing.TypeVar("E", bound=_enum.Enum)

IPAddress = _ipaddress.IPv4Address | _ipaddress.IPv6Address

_DATETIME_ADAPTER: _pydantic.TypeAdapter[_datetime.datetime] = _pydantic.TypeAdapter(
    _datetime.datetime
)
_URL_ADAPTER: _pydantic.TypeAdapter[_pydantic.AnyUrl] = _pydantic.TypeAdapter(_pydantic.AnyUrl)

# Characters allowed in an RFC 3986 URI-reference, with well-formed escapes.
_URI_REFERENCE = _re.compile(r"(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2})*")


def _article(word: str) -> str:
    # Upper-case "U" starts acronyms read as "you": a URI, a UUID.
    return "an" if word[:1] and word[:1] in "AEIOaeiou" else "a"


class ConfScalar(base.ConfigurationSchemaNode[T]):
    """
    A node that loads a single value from its string representation.

    Subclasses implement load_value(), which may return the value or an
    awaitable of it, and raise any exception to reject the input.

    Args:
        type_name: The name of the type this scalar loads, used in messages.
    """

    def __init__(self, type_name: str) -> None:
        super().__init__()
        self.type_name = type_name

    @_abc.abstractmethod
    def load_value(self, value: str) -> T | _typing.Awaitable[T]:
        """Convert ``value`` into this scalar's type, raising to reject it."""

    async def load_result(
        self,
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None = None,
    ) -> base.LoadResult[T]:
        key = self._require_key(key)
        raw = source.get(key)
        if raw is None:
            return base.LoadResult.failure(
                [errors.ConfigurationError("Expected a value.", source=source, key=key)]
            )

        try:
            loaded = self.load_value(raw)
            if _inspect.isawaitable(loaded):
                loaded = await loaded
        except Exception as e:  # noqa: BLE001 - any parser failure is a configuration error
            message = str(e) or f"Invalid {self.type_name} value: {raw!r}."
            return base.LoadResult.failure(
                [errors.ConfigurationError(message, source=source, key=key)]
            )
        return base.LoadResult.success(_typing.cast(T, loaded))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FunctionConfScalar(ConfScalar[T]):
    """
    A scalar that delegates conversion to a plain function.

    ValueError and TypeError raised by the function are reported as
    ``Expected a <type_name> value but got "<input>".``

    Args:
        type_name: The name of the type the function produces.
        parse: Converts a string into the target type.
    """

    def __init__(self, type_name: str, parse: _typing.Callable[[str], T]) -> None:
        super().__init__(type_name)
        self._parse = parse

    def load_value(self, value: str) -> T:
        try:
            return self._parse(value)
        except (ValueError, TypeError) as e:
            raise ValueError(
                f'Expected {_article(self.type_name)} {self.type_name} value but got "{value}".'
            ) from e


class ConfString(ConfScalar[str]):
    """Loads a string value as is."""

    def __init__(self) -> None:
        super().__init__("String")

    def load_value(self, value: str) -> str:
        return value


class ConfBoolean(ConfScalar[bool]):
    """Loads ``true`` or ``false``, case-insensitively."""

    def __init__(self) -> None:
        super().__init__("Boolean")

    def load_value(self, value: str) -> bool:
        lowered = value.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        raise ValueError(f'Expected a boolean value but got "{value}".')


def _parse_number(value: str) -> int | float:
    try:
        return int(value)
    except ValueError:
        return float(value)


class ConfNumber(FunctionConfScalar[int | float]):
    """Loads an int if the text is integral, otherwise a float."""

    def __init__(self) -> None:
        super().__init__("Number", _parse_number)


class ConfInteger(FunctionConfScalar[int]):
    def __init__(self) -> None:
        super().__init__("Integer", int)


class ConfDouble(FunctionConfScalar[float]):
    def __init__(self) -> None:
        super().__init__("Double", float)


def _parse_uri(value: str) -> _pydantic.AnyUrl | str:
    if not _URI_REFERENCE.fullmatch(value):
        raise ValueError(f"Invalid characters in URI reference: {value!r}")
    # Raises ValueError for malformed authorities such as "http://[::1".
    parts = _urllib_parse.urlsplit(value)
    if parts.scheme:
        return _URL_ADAPTER.validate_python(value)
    return value


class ConfUri(FunctionConfScalar[_pydantic.AnyUrl | str]):
    """
    Loads a URI reference.

    Absolute URIs such as ``postgres://localhost:5432/db`` are returned as
    pydantic ``AnyUrl`` values. Relative references such as ``/api/v1`` or
    ``example.com/path`` have no scheme to validate against and are returned
    as strings.
    """

    def __init__(self) -> None:
        super().__init__("URI", _parse_uri)


class ConfDateTime(FunctionConfScalar[_datetime.datetime]):
    """Loads an ISO 8601 date-time such as ``2021-01-01T00:00:00Z``."""

    def __init__(self) -> None:
        super().__init__("DateTime", _DATETIME_ADAPTER.validate_python)


class ConfInternetAddress(ConfScalar[IPAddress]):
    """Loads an IPv4 or IPv6 address."""

    def __init__(self) -> None:
        super().__init__("InternetAddress")

    def load_value(self, value: str) -> IPAddress:
        try:
            return _ipaddress.ip_address(value)
        except ValueError:
            raise ValueError(f'Expected an IPv4 or IPv6 address but got "{value}".') from None


class ConfEnum(ConfScalar[E]):
    """
    Loads an enum member by name.

    Args:
        values: The enum class, or the members that may be loaded.
    """

    def __init__(self, values: type[E] | _typing.Iterable[E]) -> None:
        super().__init__("Enum")
        self.values: tuple[E, ...] = tuple(values)

    def load_value(self, value: str) -> E:
        for member in self.values:
            if member.name == value:
                return member
        names = ", ".join(member.name for member in self.values)
        raise ValueError(f'Expected one of {names} but got "{value}".')
