"""Core tmux operations - async CLI runner shared by the tmux modules.

PUBLIC API:
  - run_tmux: Execute a tmux command and return its stdout
  - is_tmux_running: Check if a tmux server is reachable
"""

from __future__ import annotations

import asyncio
import logging

from panetrack.tmux.exceptions import TmuxError, TmuxNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TMUX_BIN = "tmux"


async def run_tmux(args: list[str], tmux_bin: str = DEFAULT_TMUX_BIN) -> str:
    """Run ``tmux <args>`` without a shell and return stdout.

    Arguments are passed as an argv list, so command text never needs
    shell quoting.

    Raises:
        TmuxNotFoundError: The tmux binary could not be executed.
        TmuxError: tmux exited with a non-zero status.
    """
    cmd = [tmux_bin, *args]
    logger.debug("run_tmux: %s", cmd)
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise TmuxNotFoundError(f"tmux binary not found: {tmux_bin}", args) from e

    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        message = stderr.decode("utf-8", errors="replace").strip()
        raise TmuxError(
            f"Failed to execute tmux command ({' '.join(args[:1])}): {message}", args
        )
    return stdout.decode("utf-8", errors="replace")


async def is_tmux_running(tmux_bin: str = DEFAULT_TMUX_BIN) -> bool:
    """Check if tmux is installed and a server is running."""
    try:
        await run_tmux(["list-sessions", "-F", "#{session_name}"], tmux_bin=tmux_bin)
    except TmuxError:
        return False
    return True
