"""Tool registry mapping tool names to their argument schema and handler.

The registry is populated once during startup and frozen before the server
accepts requests. Dispatch goes through :meth:`ToolRegistry.resolve` only.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any

from fastmcp.utilities.logging import get_logger
from pydantic import BaseModel

from snowflake_mcp.exceptions import ToolNotFoundError
from snowflake_mcp.protocol.models import ToolResult

_logger = get_logger(__name__)

ToolHandler = Callable[[Any], Awaitable[ToolResult]]


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Immutable description of a registered tool."""

    name: str
    description: str
    arguments_model: type[BaseModel]
    handler: ToolHandler

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the tool arguments."""
        return self.arguments_model.model_json_schema()


class ToolRegistry:
    """Name-keyed collection of :class:`ToolDescriptor` objects."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._frozen = False

    def register(self, descriptor: ToolDescriptor) -> None:
        """Add a tool. Only valid before :meth:`freeze`; names must be unique."""
        if self._frozen:
            msg = f"Tool registry is frozen; cannot register {descriptor.name!r}"
            raise ValueError(msg)
        if descriptor.name in self._tools:
            msg = f"Tool {descriptor.name!r} is already registered"
            raise ValueError(msg)
        self._tools[descriptor.name] = descriptor
        _logger.info("Tool registered: %s", descriptor.name)

    def freeze(self) -> ToolRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, name: str) -> ToolDescriptor:
        """Return the descriptor registered under ``name``.

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        descriptor = self._tools.get(name)
        if descriptor is None:
            msg = f"Tool not found: {name}"
            raise ToolNotFoundError(msg)
        return descriptor

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())
