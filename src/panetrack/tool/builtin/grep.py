"""Grep tool — search a finished command's output."""

from __future__ import annotations

import json
from typing import ClassVar

from pydantic import BaseModel, Field

from panetrack.errors import CommandNotFoundError, CommandPendingError
from panetrack.protocol.tracker import CommandTracker
from panetrack.tool.base import BaseTool, ToolError, ToolOk, ToolResult


class GrepCommandOutputParams(BaseModel):
    command_id: str = Field(description="ID of the executed command.")
    pattern: str = Field(description="Regular expression (Python re syntax).")
    flags: str = Field(
        default="",
        description="Regex flags: i (ignore case), m (multiline), s (dotall). Others are ignored.",
    )
    limit: int | None = Field(
        default=None,
        gt=0,
        description="Maximum number of matching lines to return, from the first match on.",
    )


class GrepCommandOutputTool(BaseTool[GrepCommandOutputParams]):
    """Search the full output of a completed command line by line."""

    name: ClassVar[str] = "grep-command-output"
    description: ClassVar[str] = (
        "Search completed command output lines using a regular expression. "
        "Requires the command to have finished. Returns matching lines as JSON."
    )
    param_model: ClassVar[type[BaseModel]] = GrepCommandOutputParams

    def __init__(self, tracker: CommandTracker) -> None:
        self._tracker = tracker

    async def execute(self, params: GrepCommandOutputParams) -> ToolResult:
        try:
            matches = self._tracker.grep(params.command_id, params.pattern, params.flags)
        except (CommandNotFoundError, CommandPendingError) as e:
            return ToolError(output=str(e))

        limited = matches[: params.limit] if params.limit else matches
        payload = {
            "commandId": params.command_id,
            "pattern": params.pattern,
            "flags": params.flags,
            "totalMatches": len(matches),
            "returned": len(limited),
            "matches": limited,
        }
        return ToolOk(
            output=json.dumps(payload, indent=2),
            brief=f"{len(matches)} matches",
        )
