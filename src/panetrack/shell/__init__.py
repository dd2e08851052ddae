"""Shell dialects and per-pane shell configuration."""

from panetrack.shell.config import ShellConfig
from panetrack.shell.dialect import (
    END_PREFIX,
    START_PREFIX,
    SUPPORTED_DIALECTS,
    TCL_HELPER_DEFINITION,
    ShellDialect,
    normalize_dialect,
    wrap_command,
)

__all__ = [
    "END_PREFIX",
    "START_PREFIX",
    "SUPPORTED_DIALECTS",
    "TCL_HELPER_DEFINITION",
    "ShellConfig",
    "ShellDialect",
    "normalize_dialect",
    "wrap_command",
]
