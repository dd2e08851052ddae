"""Tmux-specific exceptions.

PUBLIC API:
  - TmuxError: Base exception for all tmux operations
  - TmuxNotFoundError: tmux binary missing from PATH
"""

from __future__ import annotations

from panetrack.errors import PanetrackError


class TmuxError(PanetrackError):
    """Raised when a tmux CLI call fails."""

    def __init__(self, message: str, args: list[str] | None = None) -> None:
        super().__init__(message)
        self.tmux_args = list(args or [])


class TmuxNotFoundError(TmuxError):
    """Raised when the tmux binary cannot be executed."""
