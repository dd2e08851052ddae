"""Shell type tool — choose the dialect commands are wrapped for."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, Field

from panetrack.protocol.tracker import CommandTracker
from panetrack.shell.dialect import ShellDialect
from panetrack.tool.base import BaseTool, ToolOk, ToolResult


class SetShellTypeParams(BaseModel):
    type: ShellDialect = Field(description="Shell dialect: bash, zsh, fish or tclsh.")
    pane_id: str | None = Field(
        default=None,
        description="Pane to override. Omit to change the default shell type.",
    )


class SetShellTypeTool(BaseTool[SetShellTypeParams]):
    name: ClassVar[str] = "set-shell-type"
    description: ClassVar[str] = (
        "Configure the shell used for command execution (bash, zsh, fish, tclsh). "
        "Provide pane_id to override a specific pane."
    )
    param_model: ClassVar[type[BaseModel]] = SetShellTypeParams

    def __init__(self, tracker: CommandTracker) -> None:
        self._tracker = tracker

    async def execute(self, params: SetShellTypeParams) -> ToolResult:
        dialect = self._tracker.set_shell_type(params.type, params.pane_id)
        target = f"pane {params.pane_id}" if params.pane_id else "default"
        return ToolOk(
            output=f"Shell type for {target} set to {dialect}",
            brief=f"{target}: {dialect}",
        )
