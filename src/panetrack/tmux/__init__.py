"""Tmux collaborators - pane capture and key injection over the tmux CLI.

PUBLIC API:
  - run_tmux: Run tmux command and return stdout
  - is_tmux_running: Check if a tmux server is reachable
  - TmuxPaneSource: Pane content source (capture-pane)
  - TmuxKeyInjector: Key injector (send-keys)
  - PaneContentSource / KeyInjector: Collaborator protocols
  - SPECIAL_KEYS: Named keys sent as-is
  - TmuxError: Base exception for tmux failures
"""

from panetrack.tmux.base import SPECIAL_KEYS, KeyInjector, PaneContentSource
from panetrack.tmux.core import is_tmux_running, run_tmux
from panetrack.tmux.exceptions import TmuxError, TmuxNotFoundError
from panetrack.tmux.pane import TmuxKeyInjector, TmuxPaneSource, slice_captured

__all__ = [
    "SPECIAL_KEYS",
    "KeyInjector",
    "PaneContentSource",
    "TmuxError",
    "TmuxKeyInjector",
    "TmuxNotFoundError",
    "TmuxPaneSource",
    "is_tmux_running",
    "run_tmux",
    "slice_captured",
]
