from __future__ import annotations

import pytest
from pydantic import BaseModel

from snowflake_mcp.exceptions import ToolNotFoundError
from snowflake_mcp.execute import RUN_QUERY_TOOL_NAME, RunQueryArguments
from snowflake_mcp.protocol import ToolDescriptor, ToolRegistry, ToolResult


class _EchoArgs(BaseModel):
    text: str


async def _echo(args: _EchoArgs) -> ToolResult:
    return ToolResult.from_text(args.text)


def _descriptor(name: str = "echo") -> ToolDescriptor:
    return ToolDescriptor(name=name, description="Echo text", arguments_model=_EchoArgs, handler=_echo)


def test_register_and_resolve() -> None:
    registry = ToolRegistry()
    descriptor = _descriptor()
    registry.register(descriptor)

    assert registry.resolve("echo") is descriptor
    assert "echo" in registry
    assert len(registry) == 1
    assert registry.names() == ["echo"]
    assert list(registry) == [descriptor]


def test_resolve_unknown_tool() -> None:
    registry = ToolRegistry()
    with pytest.raises(ToolNotFoundError, match="Tool not found: nope"):
        registry.resolve("nope")


def test_duplicate_names_rejected() -> None:
    registry = ToolRegistry()
    registry.register(_descriptor())
    with pytest.raises(ValueError, match="already registered"):
        registry.register(_descriptor())


def test_frozen_registry_rejects_registration() -> None:
    registry = ToolRegistry().freeze()
    assert registry.frozen
    with pytest.raises(ValueError, match="frozen"):
        registry.register(_descriptor())


def test_descriptor_is_immutable() -> None:
    descriptor = _descriptor()
    with pytest.raises(AttributeError):
        descriptor.name = "other"  # type: ignore[misc]


def test_run_query_descriptor_schema(sqlite_tool) -> None:  # noqa: ANN001
    descriptor = sqlite_tool.descriptor()
    assert descriptor.name == RUN_QUERY_TOOL_NAME
    assert descriptor.arguments_model is RunQueryArguments
    schema = descriptor.input_schema()
    assert schema["required"] == ["sql"]
    assert schema["properties"]["sql"]["type"] == "string"
