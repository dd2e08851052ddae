"""Tool system — base classes, registry, and output truncation."""

from panetrack.tool.base import BaseTool, ToolError, ToolOk, ToolResult
from panetrack.tool.registry import ToolRegistry
from panetrack.tool.truncation import truncate_output

__all__ = [
    "BaseTool",
    "ToolResult",
    "ToolOk",
    "ToolError",
    "ToolRegistry",
    "truncate_output",
]
