"""Plugin registry for pdfcollate tools."""

from __future__ import annotations

from typing import Any

from .interfaces import BaseTool, ToolContext


class ToolRegistry:
    """Maps tool names to the classes that run them against a context."""

    def __init__(self) -> None:
        self._tools: dict[str, type[BaseTool]] = {}

    def register(self, name: str, tool_class: type[BaseTool]) -> None:
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")
        tool_class.name = name
        self._tools[name] = tool_class

    def create(self, name: str, context: ToolContext) -> BaseTool:
        try:
            tool_class = self._tools[name]
        except KeyError as exc:
            raise KeyError(f"Tool '{name}' is not registered") from exc
        return tool_class(context)

    def run(self, name: str, context: ToolContext) -> Any:
        """Create the tool registered as *name* and run it on *context*."""

        return self.create(name, context).run()

    def names(self) -> list[str]:
        return sorted(self._tools)


registry = ToolRegistry()


def register_tool(name: str):
    def decorator(cls: type[BaseTool]) -> type[BaseTool]:
        registry.register(name, cls)
        return cls

    return decorator


__all__ = ["ToolRegistry", "registry", "register_tool"]
