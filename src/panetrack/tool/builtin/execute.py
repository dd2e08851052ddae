"""Execute tool — type a command into a pane and start tracking it."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, Field

from panetrack.protocol.tracker import CommandTracker
from panetrack.tmux.exceptions import TmuxError
from panetrack.tool.base import BaseTool, ToolError, ToolOk, ToolResult


class ExecuteCommandParams(BaseModel):
    pane_id: str = Field(description="ID of the tmux pane (e.g. %3).")
    command: str = Field(description="Command to execute.")
    raw_mode: bool = Field(
        default=False,
        description=(
            "Send the command without completion markers, for REPLs and "
            "interactive programs. Status tracking is disabled; use capture-pane "
            "to verify the outcome."
        ),
    )
    no_enter: bool = Field(
        default=False,
        description=(
            "Send keystrokes without pressing Enter, for TUI navigation "
            "(btop, vim, less). Named keys (Up, Down, Escape, Tab, ...) are sent "
            "as-is, other strings character by character. Implies raw_mode."
        ),
    )


class ExecuteCommandTool(BaseTool[ExecuteCommandParams]):
    """Run a command in a pane.

    Non-raw commands are wrapped with completion markers; their status is
    read back with get-command-result or wait-command-completion.
    """

    name: ClassVar[str] = "execute-command"
    description: ClassVar[str] = (
        "Execute a command in a tmux pane and track its completion. "
        "For interactive applications (REPLs, editors) use raw_mode=true. "
        "When raw_mode is false, avoid heredocs and other multi-line constructs "
        "since they conflict with the completion markers; prefer printf or echo "
        "for writing files."
    )
    param_model: ClassVar[type[BaseModel]] = ExecuteCommandParams

    def __init__(self, tracker: CommandTracker) -> None:
        self._tracker = tracker

    async def execute(self, params: ExecuteCommandParams) -> ToolResult:
        raw = params.raw_mode or params.no_enter
        try:
            command_id = await self._tracker.execute(
                params.pane_id,
                params.command,
                raw_mode=raw,
                no_enter=params.no_enter,
            )
        except TmuxError as e:
            return ToolError(output=f"Error executing command: {e}")

        if raw:
            mode = (
                "Keys sent without Enter"
                if params.no_enter
                else "Interactive command started (raw mode)"
            )
            return ToolOk(
                output=(
                    f"{mode}.\n\nStatus tracking is disabled.\n"
                    f"Use 'capture-pane' with pane_id '{params.pane_id}' to verify "
                    f"the command outcome.\n\nCommand ID: {command_id}"
                ),
                brief=f"Sent to {params.pane_id}",
            )

        return ToolOk(
            output=(
                f"Command execution started.\n\nCommand ID: {command_id}\n\n"
                "Use 'get-command-result' or 'wait-command-completion' with this ID. "
                "Status will change from 'pending' to 'completed' or 'error' "
                "when finished."
            ),
            brief=f"Started in {params.pane_id}",
        )
