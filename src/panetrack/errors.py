"""Exception hierarchy for panetrack."""

from __future__ import annotations


class PanetrackError(Exception):
    """Base exception for all panetrack operations."""


class CommandNotFoundError(PanetrackError):
    """Raised when a command id is not tracked by the registry."""

    def __init__(self, command_id: str) -> None:
        super().__init__(f"Command not found: {command_id}")
        self.command_id = command_id


class CommandPendingError(PanetrackError):
    """Raised when an operation needs finalized output but the command is still running."""

    def __init__(self, command_id: str) -> None:
        super().__init__(f"Command still pending: {command_id}")
        self.command_id = command_id
