"""Tool registry — register, look up, and dispatch tools by name."""

from __future__ import annotations

import logging
from typing import Any

from panetrack.tool.base import BaseTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of available tools.

    Manages tool registration, lookup, and dispatch. Tools are registered
    by name, the same name clients use to call them.
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool instance."""
        if tool.name in self._tools:
            logger.warning("Tool %s already registered, overwriting", tool.name)
        self._tools[tool.name] = tool

    def register_many(self, tools: list[BaseTool]) -> None:
        """Register multiple tools."""
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> BaseTool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def get_specs(self, names: list[str] | None = None) -> list[dict[str, Any]]:
        """Get tool specs, optionally filtered by name.

        Args:
            names: If provided, only return specs for these tools.
                   If None, return all.
        """
        tools = self._tools.values()
        if names is not None:
            tools = [t for t in tools if t.name in names]
        return [t.to_spec() for t in tools]

    def names(self) -> list[str]:
        """Get all registered tool names."""
        return list(self._tools.keys())

    async def dispatch(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> tuple[str, bool]:
        """Dispatch a call to the named tool.

        Returns:
            (content, is_error) tuple.
        """
        tool = self._tools.get(name)
        if tool is None:
            return (
                f"Unknown tool: {name}. Available tools: {', '.join(self.names())}",
                True,
            )

        logger.debug("Dispatching tool %s with %s", name, arguments)
        return await tool(arguments or {})

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
