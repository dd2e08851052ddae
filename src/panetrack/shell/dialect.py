"""Shell dialects — wrap commands with completion sentinels.

Each wrapped command prints a start sentinel, runs the user's command, then
prints an end sentinel carrying the shell's exit status and the pairing
sequence number:

    TMUX_MCP_START_<seq>
    ...command output...
    TMUX_MCP_DONE_<exit>_<seq>

POSIX-style shells get inline ``echo`` statements. ``tclsh`` evaluates one
Tcl expression per line, so it goes through a helper procedure installed
once per pane (see ``TCL_HELPER_DEFINITION``).
"""

from __future__ import annotations

import enum
import logging

logger = logging.getLogger(__name__)

START_PREFIX = "TMUX_MCP_START"
END_PREFIX = "TMUX_MCP_DONE"

TCL_NAMESPACE = "::tmux_mcp"


class ShellDialect(enum.StrEnum):
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    TCLSH = "tclsh"


SUPPORTED_DIALECTS: tuple[ShellDialect, ...] = tuple(ShellDialect)
DEFAULT_DIALECT = ShellDialect.BASH

# Native last-exit-status expression per POSIX-style shell.
# fish's ``$status_1`` would parse as a variable named ``status_1``, so the
# expression is brace-grouped before the ``_<seq>`` suffix is appended.
_EXIT_STATUS_EXPR: dict[ShellDialect, str] = {
    ShellDialect.BASH: "$?",
    ShellDialect.ZSH: "$?",
    ShellDialect.FISH: '"{$status}"',
}

TCL_HELPER_DEFINITION = " ".join(
    [
        f"namespace eval {TCL_NAMESPACE} {{",
        "proc run {seq cmd} {",
        f'puts "{START_PREFIX}_${{seq}}"; flush stdout;',
        "set status [catch {uplevel #0 $cmd} result opts];",
        "if {$status == 0} {",
        'if {$result ne ""} { puts $result; flush stdout }',
        "} else {",
        "if {[dict exists $opts -errorinfo]} { puts [dict get $opts -errorinfo] } else { puts $result };",
        "flush stdout",
        "};",
        "if {$status != 0} { set status 1 };",
        f'puts "{END_PREFIX}_${{status}}_${{seq}}"; flush stdout',
        "}",
        "}",
    ]
)


def normalize_dialect(value: str | ShellDialect | None) -> ShellDialect:
    """Map a dialect name to a ``ShellDialect``, defaulting to bash."""
    if isinstance(value, ShellDialect):
        return value
    try:
        return ShellDialect((value or "").strip().lower())
    except ValueError:
        logger.debug("Unknown shell type %r, falling back to %s", value, DEFAULT_DIALECT)
        return DEFAULT_DIALECT


def start_marker(seq: int) -> str:
    return f"{START_PREFIX}_{seq}"


def end_marker(exit_code: int, seq: int) -> str:
    return f"{END_PREFIX}_{exit_code}_{seq}"


def wrap_command(command: str, dialect: ShellDialect | str, seq: int) -> str:
    """Wrap ``command`` with start/end sentinels for ``dialect``.

    Args:
        command: The command text exactly as the user wrote it.
        dialect: Target shell dialect.
        seq: Pairing sequence number embedded in both sentinels.

    Returns:
        The text to type into the pane.
    """
    dialect = normalize_dialect(dialect)
    if dialect is ShellDialect.TCLSH:
        wrapped = build_tcl_invocation(command, seq)
    else:
        status_expr = _EXIT_STATUS_EXPR[dialect]
        wrapped = (
            f'echo "{start_marker(seq)}"; {command}; '
            f'echo "{END_PREFIX}_{status_expr}_{seq}"'
        )
    logger.debug("wrap_command: dialect=%s seq=%d wrapped=%r", dialect, seq, wrapped)
    return wrapped


def build_tcl_invocation(command: str, seq: int) -> str:
    """Call the installed Tcl helper with the command as a braced body."""
    return f"{TCL_NAMESPACE}::run {seq} {{{command}}}"


def needs_helper(dialect: ShellDialect | str) -> bool:
    """Whether commands in ``dialect`` require the per-pane helper."""
    return normalize_dialect(dialect) is ShellDialect.TCLSH
