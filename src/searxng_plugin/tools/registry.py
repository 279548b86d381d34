"""Tool host interface and an in-process registry implementing it."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from searxng_plugin.errors import ToolError

ToolCallable = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


def _empty_schema() -> dict[str, object]:
    return {"type": "object", "properties": {}}


@dataclass(slots=True)
class ToolDef:
    name: str
    description: str
    handler: ToolCallable
    parameters: dict[str, object] = field(default_factory=_empty_schema)


class ToolHost(Protocol):
    """The one capability a plugin needs from its host: registering a tool."""

    def register(
        self,
        name: str,
        description: str,
        handler: ToolCallable,
        parameters: dict[str, object] | None = None,
    ) -> None: ...


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, ToolDef] = {}

    def register(
        self,
        name: str,
        description: str,
        handler: ToolCallable,
        parameters: dict[str, object] | None = None,
    ) -> None:
        self._tools[name] = ToolDef(
            name=name,
            description=description,
            handler=handler,
            parameters=parameters or _empty_schema(),
        )

    def get(self, name: str) -> ToolDef | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def schemas(self) -> list[dict[str, object]]:
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            }
            for tool in self._tools.values()
        ]

    async def call(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        tool = self._tools.get(name)
        if tool is None:
            raise ToolError(f"unknown tool: {name}")
        return await tool.handler(arguments)
