"""Capture tool — read what a pane currently shows."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, Field

from panetrack.protocol.tracker import CommandTracker
from panetrack.tmux.exceptions import TmuxError
from panetrack.tool.base import BaseTool, ToolError, ToolOk, ToolResult
from panetrack.tool.truncation import sanitize_pane_text


class CapturePaneParams(BaseModel):
    pane_id: str = Field(description="ID of the tmux pane.")
    lines: int | None = Field(
        default=None,
        description="Number of trailing lines to capture (default 200). Ignored when start is set.",
    )
    start: str | None = Field(
        default=None,
        description="Start line; negative counts from the bottom, '-' is the top of history.",
    )
    end: str | None = Field(
        default=None,
        description="End line (inclusive); negative counts from the bottom, '-' is the last line.",
    )
    colors: bool = Field(
        default=False, description="Include ANSI color escape sequences."
    )


class CapturePaneTool(BaseTool[CapturePaneParams]):
    """Capture pane content, for raw-mode commands and interactive apps."""

    name: ClassVar[str] = "capture-pane"
    description: ClassVar[str] = (
        "Capture the content of a tmux pane. "
        "Use after raw-mode commands to see what the application printed."
    )
    param_model: ClassVar[type[BaseModel]] = CapturePaneParams

    def __init__(self, tracker: CommandTracker) -> None:
        self._tracker = tracker

    async def execute(self, params: CapturePaneParams) -> ToolResult:
        lines = params.lines if params.lines and params.lines > 0 else None
        try:
            content = await self._tracker.capture(
                params.pane_id,
                lines=lines,
                start=params.start or None,
                end=params.end or None,
                include_colors=params.colors,
            )
        except TmuxError as e:
            return ToolError(output=f"Error capturing pane content: {e}")

        content = sanitize_pane_text(content)
        return ToolOk(
            output=content or "No content captured",
            brief=f"Captured {params.pane_id}",
        )
