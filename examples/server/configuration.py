"""
Example server configuration.

Run from this directory::

    python configuration.py --profiles=prod --database.password=secret
    DATABASE_PASSWORD=secret python configuration.py

or validate without starting anything::

    confschema check configuration:server_schema -- --database.password=secret
"""

from __future__ import annotations

import asyncio as _asyncio
import enum as _enum
import ipaddress as _ipaddress
import logging as _logging
import sys as _sys

import pydantic as _pydantic

import confschema
import confschema.schema as schema

_logger = _logging.getLogger(__name__)


class Profile(_enum.Enum):
    dev = "dev"
    prod = "prod"
    test = "test"


class DatabaseConfiguration(_pydantic.BaseModel):
    url: _pydantic.AnyUrl
    username: str
    password: str = _pydantic.Field(min_length=1)


class ServerConfiguration(_pydantic.BaseModel):
    port: int = _pydantic.Field(ge=1, le=65535)
    address: _ipaddress.IPv4Address | _ipaddress.IPv6Address
    log_requests: bool
    database: DatabaseConfiguration


database_schema = schema.ConfObject(
    {
        "url": schema.ConfUri(),
        "username": schema.ConfString(),
        "password": schema.ConfString(),
    },
    DatabaseConfiguration.model_validate,
)

server_schema = schema.ConfObject(
    {
        "port": schema.ConfDefault(schema.ConfInteger(), default=8080),
        "address": schema.ConfDefault(
            schema.ConfInternetAddress(), default=_ipaddress.IPv4Address("127.0.0.1")
        ),
        "log_requests": schema.ConfDefault(schema.ConfBoolean(), default=False),
        "database": database_schema,
    },
    ServerConfiguration.model_validate,
)


async def load(
    arguments: list[str],
    *,
    additional_profiles: set[Profile] | None = None,
    environment: dict[str, str] | None = None,
    directory: str | None = None,
) -> ServerConfiguration:
    """Load the server configuration for the given command line."""
    app_sources = await confschema.load_app_sources(
        Profile,
        arguments=arguments,
        default_profiles={Profile.dev},
        additional_profiles=additional_profiles,
        environment=environment,
        directory=directory,
    )
    _logger.info("Active profiles: %s", app_sources.profiles)
    return await server_schema.load(app_sources.source)


def main() -> None:
    _logging.basicConfig(level=_logging.INFO)
    try:
        configuration = _asyncio.run(load(_sys.argv[1:]))
    except (confschema.ConfigurationError, confschema.ConfigurationException) as e:
        print(e, file=_sys.stderr)
        raise SystemExit(1) from None
    print(configuration.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
