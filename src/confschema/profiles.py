"""
Configuration profiles.

A profile is a member of an application-defined enum, typically::

    class Profile(enum.Enum):
        dev = "dev"
        prod = "prod"
        test = "test"

The active profiles select which configuration files apply (see
confschema.app_sources). They are read from the ``profiles`` key as a
comma-separated list of names, e.g. ``--profiles=dev,test`` or
``PROFILES=dev,test``.

Loading profiles returns them to the caller; there is no process-wide
"active profiles" state. Pass the returned Profiles to whatever needs it.
"""

from __future__ import annotations

import enum as _enum
import logging as _logging
import typing as _typing

import confschema.constants as constants
import confschema.keys as keys
import confschema.schema as schema
import confschema.sources as sources

_logger = _logging.getLogger(__name__)

P = _typing.TypeVar("P", bound=_enum.Enum)


class Profiles(frozenset[P]):
    """An immutable set of profiles."""

    @property
    def names(self) -> list[str]:
        """The profile names, sorted alphabetically."""
        return sorted(profile.name for profile in self)

    def __repr__(self) -> str:
        return "{" + ", ".join(self.names) + "}"

    __str__ = __repr__


class ConfProfiles(schema.ConfScalar[Profiles[P]]):
    """
    Loads a comma-separated list of profile names.

    Args:
        profiles: The enum class, or all profiles that may be named.
    """

    def __init__(self, profiles: type[P] | _typing.Iterable[P]) -> None:
        super().__init__("Profiles")
        self.profiles: tuple[P, ...] = tuple(profiles)

    def load_value(self, value: str) -> Profiles[P]:
        return Profiles(self._parse_profile(name) for name in value.split(","))

    def _parse_profile(self, name: str) -> P:
        name = name.strip()
        for profile in self.profiles:
            if profile.name == name:
                return profile
        allowed = ", ".join(profile.name for profile in self.profiles)
        raise ValueError(f'Expected one of {allowed}, but got "{name}".')


def profiles_property(
    all_profiles: type[P] | _typing.Iterable[P],
    default_profiles: _typing.Iterable[P] = (),
) -> schema.ConfProperty[Profiles[P]]:
    """
    Create the property loading the ``profiles`` key.

    Args:
        all_profiles: Every profile that may be named.
        default_profiles: Used when the key is absent.
    """
    return schema.ConfProperty(
        constants.PROFILES_PROPERTY,
        schema.ConfDefault(ConfProfiles(all_profiles), default=Profiles(default_profiles)),
    )


async def load_profiles(
    source: sources.ConfigurationSource,
    all_profiles: type[P] | _typing.Iterable[P],
    *,
    default_profiles: _typing.Iterable[P] = (),
    additional_profiles: _typing.Iterable[P] | None = None,
    key: keys.ConfigurationKey | None = None,
) -> Profiles[P]:
    """
    Load the active profiles from ``source``.

    Args:
        source: Where to read the ``profiles`` key from.
        all_profiles: Every profile that may be named.
        default_profiles: Used when the key is absent.
        additional_profiles: Always added to the loaded profiles.
        key: Prefix of the ``profiles`` key, if any.

    Returns:
        The union of the loaded and additional profiles.

    Raises:
        ConfigurationException: If the value names an unknown profile.
    """
    loaded = await profiles_property(all_profiles, default_profiles).load(source, key)
    profiles = Profiles(loaded | frozenset(additional_profiles or ()))
    _logger.debug("Active profiles: %s", profiles)
    return profiles
