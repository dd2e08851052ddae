"""Command result tools — status, waiting, and listing of tracked commands."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, Field

from panetrack.protocol.record import CommandRecord
from panetrack.protocol.slicing import SliceOptions
from panetrack.protocol.tracker import CommandTracker
from panetrack.tool.base import BaseTool, ToolError, ToolOk, ToolResult

LIST_REAP_MINUTES = 10
_LABEL_WIDTH = 30


def format_record(record: CommandRecord) -> str:
    """Render a record the way result tools report it."""
    if record.pending:
        if record.result:
            return (
                f"Status: {record.status}\nCommand: {record.command}\n\n"
                f"--- Message ---\n{record.result}"
            )
        return (
            f"Command still executing...\nStarted: {record.started_at}\n"
            f"Command: {record.command}"
        )

    meta = [
        f"Status: {record.status}",
        f"Exit code: {record.exit_code if record.exit_code is not None else 'n/a'}",
        f"Command: {record.command}",
    ]
    if record.truncated:
        end = record.line_end_index - 1 if record.line_end_index is not None else "unknown"
        meta.append(
            f"Output truncated: showing {record.returned_lines} of {record.total_lines} "
            f"lines (slice {record.line_start_index}..{end})"
        )
    elif record.output_lines is not None:
        returned = record.returned_lines
        meta.append(
            f"Lines returned: {returned if returned is not None else len(record.output_lines)}"
        )
    return "\n".join(meta) + f"\n\n--- Output ---\n{record.result or ''}"


def _brief(record: CommandRecord) -> str:
    if record.pending:
        return f"{record.id[:8]} pending"
    return f"{record.id[:8]} {record.status} (exit {record.exit_code})"


class GetCommandResultParams(BaseModel):
    command_id: str = Field(description="ID of the executed command.")
    lines: int | None = Field(
        default=None, gt=0, description="Return only the last N lines of output."
    )
    start: int | None = Field(
        default=None, ge=0, description="Start line index (0-based) of the slice to return."
    )
    end: int | None = Field(
        default=None,
        ge=0,
        description="End line index (0-based, inclusive) of the slice to return.",
    )


class GetCommandResultTool(BaseTool[GetCommandResultParams]):
    """Check a command once and report its status and output."""

    name: ClassVar[str] = "get-command-result"
    description: ClassVar[str] = "Get the result of an executed command."
    param_model: ClassVar[type[BaseModel]] = GetCommandResultParams

    def __init__(self, tracker: CommandTracker) -> None:
        self._tracker = tracker

    async def execute(self, params: GetCommandResultParams) -> ToolResult:
        options = SliceOptions(lines=params.lines, start=params.start, end=params.end)
        record = await self._tracker.check_status(params.command_id, options)
        if record is None:
            return ToolError(output=f"Command not found: {params.command_id}")
        return ToolOk(output=format_record(record), brief=_brief(record))


class WaitCommandCompletionParams(GetCommandResultParams):
    timeout_ms: int | None = Field(
        default=None, gt=0, description="Maximum milliseconds to wait (default 10000)."
    )
    interval_ms: int | None = Field(
        default=None, gt=0, description="Polling interval in milliseconds (default 150)."
    )


class WaitCommandCompletionTool(BaseTool[WaitCommandCompletionParams]):
    """Poll a command until it finishes or the timeout expires.

    A timeout is not an error: the still-pending status is reported.
    """

    name: ClassVar[str] = "wait-command-completion"
    description: ClassVar[str] = (
        "Poll until a command completes or timeout expires. "
        "Returns final or intermediate status with sliced output."
    )
    param_model: ClassVar[type[BaseModel]] = WaitCommandCompletionParams

    def __init__(self, tracker: CommandTracker) -> None:
        self._tracker = tracker

    async def execute(self, params: WaitCommandCompletionParams) -> ToolResult:
        options = SliceOptions(lines=params.lines, start=params.start, end=params.end)
        record = await self._tracker.wait(
            params.command_id,
            timeout=params.timeout_ms / 1000 if params.timeout_ms else None,
            interval=params.interval_ms / 1000 if params.interval_ms else None,
            options=options,
        )
        if record is None:
            return ToolError(output=f"Command not found: {params.command_id}")
        return ToolOk(output=format_record(record), brief=_brief(record))


class ListCommandsParams(BaseModel):
    pass


class ListCommandsTool(BaseTool[ListCommandsParams]):
    """List tracked commands, dropping finished ones older than ten minutes."""

    name: ClassVar[str] = "list-commands"
    description: ClassVar[str] = (
        "List tracked commands with their status. "
        f"Finished commands older than {LIST_REAP_MINUTES} minutes are dropped."
    )
    param_model: ClassVar[type[BaseModel]] = ListCommandsParams

    def __init__(self, tracker: CommandTracker) -> None:
        self._tracker = tracker

    async def execute(self, params: ListCommandsParams) -> ToolResult:
        self._tracker.reap(LIST_REAP_MINUTES)

        entries = []
        for command_id in self._tracker.active_ids():
            record = self._tracker.get(command_id)
            if record is None:
                continue
            label = record.command[:_LABEL_WIDTH]
            if len(record.command) > _LABEL_WIDTH:
                label += "..."
            entries.append(f"{command_id}  {record.status:<9}  {record.pane_id}  {label}")

        if not entries:
            return ToolOk(output="No tracked commands.", brief="0 commands")
        return ToolOk(output="\n".join(entries), brief=f"{len(entries)} commands")
