"""Tests for load results, the node tree and single-child wrappers."""

import typing as _typing

import pytest as _pytest

import confschema.errors as errors
import confschema.schema as schema
import confschema.sources as sources
import tests.conftest as conftest


class ExplodingScalar(schema.ConfScalar[str]):
    """A scalar that fails the test if it is ever asked for a value."""

    def __init__(self) -> None:
        super().__init__("Exploding")
        self.calls = 0

    def load_value(self, value: str) -> str:
        self.calls += 1
        raise AssertionError("child must not be consulted")


class TestLoadResult:
    """Success and failure results."""

    def test_success(self) -> None:
        result = schema.LoadResult.success(3)
        assert not result.has_errors
        assert result.unwrap() == 3

    def test_success_may_hold_none(self) -> None:
        """None is a legitimate value."""
        assert schema.LoadResult.success(None).unwrap() is None

    def test_failure_requires_errors(self) -> None:
        with _pytest.raises(ValueError):
            schema.LoadResult.failure([])

    def test_unwrap_failure_raises_all_errors(self) -> None:
        found = [errors.ConfigurationError("a"), errors.ConfigurationError("b")]
        with _pytest.raises(errors.ConfigurationException) as exc_info:
            schema.LoadResult.failure(found).unwrap()
        assert list(exc_info.value.errors) == found


class TestNodeTree:
    """Parent and child wiring."""

    def test_child_knows_parent(self) -> None:
        child = schema.ConfString()
        parent = schema.ConfNullable(child)
        assert child.parent is parent
        assert parent.children == (child,)
        assert parent.child is child
        assert parent.parent is None

    def test_child_cannot_be_reused(self) -> None:
        """A node belongs to at most one parent."""
        child = schema.ConfString()
        schema.ConfNullable(child)
        with _pytest.raises(errors.NodeAlreadyAttachedError):
            schema.ConfDefault(child, default="x")

    def test_property_reuse_in_objects(self) -> None:
        """A property cannot be shared by two objects."""
        prop = schema.ConfProperty("a", schema.ConfString())
        schema.ConfObject([prop], dict)
        with _pytest.raises(errors.NodeAlreadyAttachedError):
            schema.ConfObject([prop], dict)


class TestConfNullable:
    """Optional values."""

    @_pytest.mark.asyncio
    async def test_absent_is_none_without_consulting_child(self) -> None:
        child = ExplodingScalar()
        node = schema.ConfNullable(child)
        source = sources.DataSource({}, description="test data")
        assert await node.load(source, conftest.key("missing")) is None
        assert child.calls == 0

    @_pytest.mark.asyncio
    async def test_present_delegates(self) -> None:
        node = schema.ConfNullable(schema.ConfInteger())
        source = sources.DataSource({"port": 80}, description="test data")
        assert await node.load(source, conftest.key("port")) == 80

    @_pytest.mark.asyncio
    async def test_present_but_invalid_fails(self) -> None:
        """An invalid present value is an error, not None."""
        node = schema.ConfNullable(schema.ConfInteger())
        source = sources.DataSource({"port": "x"}, description="test data")
        result = await node.load_result(source, conftest.key("port"))
        assert result.has_errors

    @_pytest.mark.asyncio
    async def test_explicit_null_reaches_child(self) -> None:
        """A null value is contained, so the child reports it as missing."""
        node = schema.ConfNullable(schema.ConfString())
        source = sources.DataSource({"name": None}, description="test data")
        result = await node.load_result(source, conftest.key("name"))
        assert result.errors[0].message == "Expected a value."

    def test_requires_key(self) -> None:
        with _pytest.raises(ValueError):
            schema.ConfNullable(schema.ConfString()).load_sync(
                sources.DataSource({}, description="test data")
            )


class TestConfDefault:
    """Values with defaults."""

    @_pytest.mark.asyncio
    async def test_absent_is_default_without_consulting_child(self) -> None:
        child = ExplodingScalar()
        node = schema.ConfDefault(child, default="fallback")
        source = sources.DataSource({}, description="test data")
        assert await node.load(source, conftest.key("name")) == "fallback"
        assert child.calls == 0

    @_pytest.mark.asyncio
    async def test_present_overrides_default(self) -> None:
        node = schema.ConfDefault(schema.ConfInteger(), default=8080)
        source = sources.EnvironmentSource({"PORT": "9090"})
        assert await node.load(source, conftest.key("port")) == 9090


class TestConfRebase:
    """Projecting children into sub-paths."""

    @_pytest.mark.asyncio
    async def test_rebase_without_key(self) -> None:
        """At the root, the child is loaded at the base."""
        node = schema.ConfRebase(conftest.key("app", "name"), schema.ConfString())
        source = sources.DataSource({"app": {"name": "demo"}}, description="test data")
        assert await node.load(source) == "demo"

    @_pytest.mark.asyncio
    async def test_rebase_with_key(self) -> None:
        """Below a key, the base is appended to it."""
        node = schema.ConfRebase(conftest.key("name"), schema.ConfString())
        source = sources.DataSource({"apps": [{"name": "demo"}]}, description="test data")
        assert await node.load(source, conftest.key("apps", 0)) == "demo"

    @_pytest.mark.asyncio
    async def test_error_is_reported_at_rebased_key(self) -> None:
        node = schema.ConfRebase(conftest.key("port"), schema.ConfInteger())
        source = sources.DataSource({"server": {"port": "x"}}, description="test data")
        result = await node.load_result(source, conftest.key("server"))
        assert result.errors[0].key == conftest.key("server", "port")


class TestLoadEntryPoints:
    """load(), load_result() and load_sync() agree."""

    def test_load_sync(self) -> None:
        node: schema.ConfigurationSchemaNode[_typing.Any] = schema.ConfProperty(
            "a", schema.ConfBoolean()
        )
        source = sources.DataSource({"a": True}, description="test data")
        assert node.load_sync(source) is True

    def test_load_sync_raises_on_errors(self) -> None:
        node = schema.ConfProperty("a", schema.ConfBoolean())
        source = sources.DataSource({"a": "maybe"}, description="test data")
        with _pytest.raises(errors.ConfigurationException) as exc_info:
            node.load_sync(source)
        assert exc_info.value.descriptions == ['a: Expected a boolean value but got "maybe".']
