"""Tests for environment variable and command line sources."""

import os as _os
import unittest.mock as _mock

import pytest as _pytest

import confschema.sources as sources
import confschema.sources.command_line as command_line
import confschema.sources.environment as environment
import tests.conftest as conftest


class TestEnvironmentVariableName:
    """Mapping keys to environment variable names."""

    @_pytest.mark.parametrize(
        ("path", "name"),
        [
            (["port"], "PORT"),
            (["server", "port"], "SERVER_PORT"),
            (["foo", 0, "baz"], "FOO_0_BAZ"),
            (["foo", 0, 1], "FOO_0_1"),
            (["camelCase"], "CAMELCASE"),
        ],
    )
    def test_name(self, path: list[object], name: str) -> None:
        """Segments are upper-cased and joined with underscores."""
        assert environment.environment_variable_name(conftest.key(*path)) == name


class TestEnvironmentSource:
    """Reading values from environment variables."""

    def test_get_is_case_insensitive(self) -> None:
        """Variables are matched regardless of the case they were set in."""
        source = sources.EnvironmentSource({"server_Port": "80"})
        assert source.get(conftest.key("server", "port")) == "80"

    def test_get_missing(self) -> None:
        """Missing variables have no value."""
        source = sources.EnvironmentSource({"OTHER": "x"})
        assert source.get(conftest.key("port")) is None

    def test_contains_exact_and_prefix(self) -> None:
        """contains() finds the variable and any variable below it."""
        source = sources.EnvironmentSource({"FOO_0_BAZ": "1"})
        assert source.contains(conftest.key("foo"))
        assert source.contains(conftest.key("foo", 0))
        assert source.contains(conftest.key("foo", 0, "baz"))
        assert not source.contains(conftest.key("foo", 1))

    def test_contains_respects_segment_boundaries(self) -> None:
        """FOOBAR is not below FOO."""
        source = sources.EnvironmentSource({"FOOBAR": "1"})
        assert not source.contains(conftest.key("foo"))

    def test_describe_key(self) -> None:
        """Keys are described by their variable name."""
        source = sources.EnvironmentSource({})
        assert source.describe_key(conftest.key("a", 0, "b")) == "A_0_B"
        assert source.description == "environment variables"

    def test_from_environment(self, isolated_env) -> None:
        """from_environment() reads the process environment."""
        with isolated_env, _mock.patch.dict(_os.environ, {"CONFSCHEMA_TEST_VALUE": "42"}):
            source = sources.EnvironmentSource.from_environment()
        assert source.get(conftest.key("confschema", "test", "value")) == "42"

    def test_in_operator(self) -> None:
        """The in operator delegates to contains()."""
        source = sources.EnvironmentSource({"PORT": "1"})
        assert conftest.key("port") in source
        assert "PORT" not in source


class TestParseArguments:
    """Parsing raw command line arguments."""

    def test_equals_form(self) -> None:
        """--key=value binds directly, splitting at the first '='."""
        assert command_line.parse_arguments(["--a=1", "--b=x=y"]) == {"a": "1", "b": "x=y"}

    def test_space_form(self) -> None:
        """--key value consumes the next token."""
        assert command_line.parse_arguments(["--a", "1"]) == {"a": "1"}

    def test_space_form_consumes_flag_like_value(self) -> None:
        """The next token is consumed even when it looks like a flag."""
        assert command_line.parse_arguments(["--a", "--b"]) == {"a": "--b"}

    def test_trailing_flag_is_dropped(self) -> None:
        """A final --key with no value is dropped."""
        assert command_line.parse_arguments(["--a=1", "--b"]) == {"a": "1"}

    def test_positional_arguments_are_ignored(self) -> None:
        """Tokens that are not flags are skipped."""
        assert command_line.parse_arguments(["serve", "--a=1", "-x", "y"]) == {"a": "1"}

    def test_later_flags_win(self) -> None:
        """A repeated flag keeps the last value."""
        assert command_line.parse_arguments(["--a=1", "--a=2"]) == {"a": "2"}

    def test_empty_value(self) -> None:
        """--key= binds the empty string."""
        assert command_line.parse_arguments(["--a="]) == {"a": ""}


class TestCommandLineSource:
    """Reading values from command line arguments."""

    def test_get(self) -> None:
        """Values are looked up by the canonical key string."""
        source = sources.CommandLineSource(["--servers[0].port=8080"])
        assert source.get(conftest.key("servers", 0, "port")) == "8080"
        assert source.get(conftest.key("servers", 0)) is None

    def test_contains_prefix(self) -> None:
        """contains() finds flags below the key."""
        source = sources.CommandLineSource(["--servers[0].port=8080"])
        assert source.contains(conftest.key("servers"))
        assert source.contains(conftest.key("servers", 0))
        assert not source.contains(conftest.key("servers", 1))

    def test_contains_respects_segment_boundaries(self) -> None:
        """--serverside is not below server."""
        source = sources.CommandLineSource(["--serverside=1"])
        assert not source.contains(conftest.key("server"))

    def test_describe_key(self) -> None:
        """Keys are described as flags."""
        source = sources.CommandLineSource([])
        assert source.describe_key(conftest.key("a", 0, "b")) == "--a[0].b"
        assert source.description == "command line arguments"


class TestFlatSourceBoundaries:
    """Lookups through flat sources agree with their nested equivalents."""

    def test_environment_index_boundary(self) -> None:
        source = sources.EnvironmentSource({"A_0": "x"})
        assert source.contains(conftest.key("a", 0))
        assert not source.contains(conftest.key("a", 1))
        assert source.get(conftest.key("a")) is None

    def test_environment_case(self) -> None:
        source = sources.EnvironmentSource({"A": "b"})
        assert source.get(conftest.key("a")) == source.get(conftest.key("A")) == "b"

    def test_command_line_mixed_forms(self) -> None:
        source = sources.CommandLineSource(["--a=b", "--c", "d"])
        assert source.get(conftest.key("a")) == "b"
        assert source.get(conftest.key("c")) == "d"
