"""Built-in pane command tools."""

from __future__ import annotations

from panetrack.protocol.tracker import CommandTracker
from panetrack.tool.base import BaseTool
from panetrack.tool.builtin.capture import CapturePaneTool
from panetrack.tool.builtin.command import (
    GetCommandResultTool,
    ListCommandsTool,
    WaitCommandCompletionTool,
    format_record,
)
from panetrack.tool.builtin.execute import ExecuteCommandTool
from panetrack.tool.builtin.grep import GrepCommandOutputTool
from panetrack.tool.builtin.shell_type import SetShellTypeTool


def create_command_tools(tracker: CommandTracker) -> list[BaseTool]:
    """Create all pane command tools sharing a single tracker."""
    return [
        ExecuteCommandTool(tracker),
        GetCommandResultTool(tracker),
        WaitCommandCompletionTool(tracker),
        GrepCommandOutputTool(tracker),
        SetShellTypeTool(tracker),
        CapturePaneTool(tracker),
        ListCommandsTool(tracker),
    ]


__all__ = [
    "CapturePaneTool",
    "ExecuteCommandTool",
    "GetCommandResultTool",
    "GrepCommandOutputTool",
    "ListCommandsTool",
    "SetShellTypeTool",
    "WaitCommandCompletionTool",
    "create_command_tools",
    "format_record",
]
