"""Tests for nested data sources, combining sources and JSON blobs."""

import datetime as _datetime
import typing as _typing

import pytest as _pytest

import confschema.errors as errors
import confschema.sources as sources
import confschema.sources.data as data
import tests.conftest as conftest

MakeSource = _typing.Callable[..., sources.DataSource]


class TestStringifyScalar:
    """Canonical string forms of parsed scalars."""

    @_pytest.mark.parametrize(
        ("value", "text"),
        [
            ("text", "text"),
            (True, "true"),
            (False, "false"),
            (42, "42"),
            (1.5, "1.5"),
            (_datetime.date(2021, 1, 2), "2021-01-02"),
        ],
    )
    def test_scalars(self, value: object, text: str) -> None:
        """Booleans are lower case, numbers use their usual form."""
        assert data.stringify_scalar(value) == text

    def test_unsupported(self) -> None:
        """Other objects are rejected."""
        with _pytest.raises(TypeError):
            data.stringify_scalar(object())


class TestDataSource:
    """Reading values from nested maps and lists."""

    def test_root_must_be_mapping(self) -> None:
        """A list at the root is rejected."""
        with _pytest.raises(TypeError):
            sources.DataSource([1, 2], description="bad")  # type: ignore[arg-type]

    def test_get_nested(self, make_source: MakeSource) -> None:
        """Values are found through maps and lists."""
        source = make_source({"servers": [{"port": 80, "tls": True}]})
        assert source.get(conftest.key("servers", 0, "port")) == "80"
        assert source.get(conftest.key("servers", 0, "tls")) == "true"

    def test_get_composite_has_no_value(self, make_source: MakeSource) -> None:
        """Maps and lists have no string value but are contained."""
        source = make_source({"a": {"b": 1}, "l": [1]})
        assert source.get(conftest.key("a")) is None
        assert source.get(conftest.key("l")) is None
        assert source.contains(conftest.key("a"))
        assert source.contains(conftest.key("l"))

    def test_wrong_container_type(self, make_source: MakeSource) -> None:
        """An index into a map or a name into a list finds nothing."""
        source = make_source({"a": {"b": 1}, "l": [1]})
        assert not source.contains(conftest.key("a", 0))
        assert not source.contains(conftest.key("l", "b"))
        assert not source.contains(conftest.key("l", 1))

    def test_terminal_null(self, make_source: MakeSource) -> None:
        """A null value is contained but has no value."""
        source = make_source({"a": None})
        assert source.contains(conftest.key("a"))
        assert source.get(conftest.key("a")) is None

    def test_null_in_path(self, make_source: MakeSource) -> None:
        """Nothing is below a null value."""
        source = make_source({"a": None})
        assert not source.contains(conftest.key("a", "b"))
        assert source.get(conftest.key("a", "b")) is None

    def test_strings_are_not_lists(self, make_source: MakeSource) -> None:
        """Indexing into a string finds nothing."""
        source = make_source({"s": "abc"})
        assert not source.contains(conftest.key("s", 0))

    def test_describe_key(self, make_source: MakeSource) -> None:
        """Keys are described in their canonical form."""
        source = make_source({}, description="memory")
        assert source.describe_key(conftest.key("a", 0)) == "a[0]"
        assert source.description == "memory"


class TestCombiningSource:
    """First-match-wins combination of sources."""

    def test_first_value_wins(self, make_source: MakeSource) -> None:
        """The first source with a value provides it."""
        combining = sources.CombiningSource(
            [make_source({"a": "high"}), make_source({"a": "low", "b": "only-low"})]
        )
        assert combining.get(conftest.key("a")) == "high"
        assert combining.get(conftest.key("b")) == "only-low"
        assert combining.get(conftest.key("c")) is None

    def test_contains_any(self, make_source: MakeSource) -> None:
        """A key is contained if any source contains it."""
        combining = sources.CombiningSource([make_source({}), make_source({"a": {"b": 1}})])
        assert combining.contains(conftest.key("a"))
        assert not combining.contains(conftest.key("b"))

    def test_add_lowers_priority(self, make_source: MakeSource) -> None:
        """Added sources have the lowest priority."""
        combining = sources.CombiningSource()
        combining.add(make_source({"a": "first"}))
        combining.add_all([make_source({"a": "second"})])
        assert combining.get(conftest.key("a")) == "first"
        assert len(combining.sources) == 2

    def test_empty(self) -> None:
        """An empty combining source has nothing."""
        combining = sources.CombiningSource()
        assert combining.get(conftest.key("a")) is None
        assert not combining.contains(conftest.key("a"))

    def test_describe_key_names_providing_source(self, make_source: MakeSource) -> None:
        """The description names the source that provides the value."""
        combining = sources.CombiningSource(
            [sources.EnvironmentSource({"A": "1"}), make_source({"a": "2"})]
        )
        assert combining.describe_key(conftest.key("a")) == "A from environment variables"

    def test_describe_key_without_value(self, make_source: MakeSource) -> None:
        """Without a value the key is described in canonical form."""
        combining = sources.CombiningSource([make_source({})])
        assert combining.describe_key(conftest.key("a", 0)) == "a[0]"


class TestJsonConf:
    """JSON configuration blobs stored under conf.json."""

    def test_absent(self) -> None:
        """Without a blob there is no source."""
        assert sources.EnvironmentSource({}).load_json_conf() is None

    def test_environment_blob(self) -> None:
        """CONF_JSON is parsed into a source described by its variable."""
        env = sources.EnvironmentSource({"CONF_JSON": '{"server": {"port": 80}}'})
        loaded = env.load_json_conf()
        assert loaded is not None
        assert loaded.get(conftest.key("server", "port")) == "80"
        assert loaded.description == "CONF_JSON"

    def test_command_line_blob(self) -> None:
        """--conf.json is parsed into a source described by its flag."""
        command_line = sources.CommandLineSource(['--conf.json={"a": [true]}'])
        loaded = command_line.load_json_conf()
        assert loaded is not None
        assert loaded.get(conftest.key("a", 0)) == "true"
        assert loaded.description == "--conf.json"

    def test_invalid_json(self) -> None:
        """Unparseable JSON is a configuration error at the blob's key."""
        env = sources.EnvironmentSource({"CONF_JSON": "{"})
        with _pytest.raises(errors.ConfigurationError) as exc_info:
            env.load_json_conf()
        assert exc_info.value.key == sources.JSON_CONF_KEY
        assert exc_info.value.source is env
        assert exc_info.value.message.startswith("Failed to parse JSON:")

    @_pytest.mark.parametrize(
        ("blob", "type_name"),
        [
            ("[]", "array"),
            ("1", "number"),
            ('"s"', "string"),
            ("null", "null"),
            ("true", "boolean"),
        ],
    )
    def test_non_object(self, blob: str, type_name: str) -> None:
        """The top-level value must be an object."""
        env = sources.EnvironmentSource({"CONF_JSON": blob})
        with _pytest.raises(errors.ConfigurationError) as exc_info:
            env.load_json_conf()
        assert exc_info.value.description == (
            f"CONF_JSON: Expected JSON value to be an object, but got {type_name}."
        )
