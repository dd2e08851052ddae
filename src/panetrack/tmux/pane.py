"""Pane operations - capture content and inject keystrokes via the tmux CLI."""

from __future__ import annotations

import logging

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from panetrack.tmux.base import SPECIAL_KEYS
from panetrack.tmux.core import DEFAULT_TMUX_BIN, run_tmux

logger = logging.getLogger(__name__)

DEFAULT_CAPTURE_LINES = 200


def _parse_offset(value: int | str, dash: int) -> int | None:
    """Parse a tmux-style line offset; ``-`` maps to ``dash``."""
    if isinstance(value, int):
        return value
    if value.strip() == "-":
        return dash
    try:
        return int(value)
    except ValueError:
        return None


def _strip_trailing_empty_lines(lines: list[str]) -> list[str]:
    """Drop the blank rows tmux adds to fill the pane height."""
    lines = list(lines)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def slice_captured(
    lines: list[str],
    count: int | None = DEFAULT_CAPTURE_LINES,
    start: int | str | None = None,
    end: int | str | None = None,
) -> list[str]:
    """Re-slice captured lines.

    tmux's ``-S``/``-E`` offsets depend on the cursor position, so a
    generous range is captured and the requested window is cut here.

    Args:
        lines: Captured lines.
        count: Trailing line count, used when ``start`` is not given.
        start: Start offset; negative counts from the bottom, ``-`` is 0.
        end: Inclusive end offset; negative counts from the bottom,
            ``-`` is the last line.
    """
    total = len(lines)
    slice_start, slice_end = 0, total

    if start is not None:
        value = _parse_offset(start, 0)
        if value is not None:
            slice_start = max(0, total + value) if value < 0 else min(total, value)
    elif count is not None and count > 0:
        slice_start = max(0, total - count)

    if end is not None:
        value = _parse_offset(end, total - 1)
        if value is None:
            slice_end = total
        elif value < 0:
            slice_end = max(0, total + value + 1)
        else:
            slice_end = min(total, value + 1)

    if slice_end < slice_start:
        slice_end = slice_start
    return lines[slice_start:slice_end]


class TmuxPaneSource:
    """Pane content source backed by ``tmux capture-pane``."""

    def __init__(
        self,
        tmux_bin: str = DEFAULT_TMUX_BIN,
        default_lines: int = DEFAULT_CAPTURE_LINES,
    ) -> None:
        self.tmux_bin = tmux_bin
        self.default_lines = default_lines

    async def capture(
        self,
        pane_id: str,
        lines: int | None = None,
        start: int | str | None = None,
        end: int | str | None = None,
        include_colors: bool = False,
    ) -> list[str]:
        """Capture pane content; ``lines=0`` captures the whole scrollback."""
        count = self.default_lines if lines is None else lines

        if start is not None:
            tmux_start = str(start)
        elif count == 0:
            tmux_start = "-"
        else:
            tmux_start = f"-{count}"

        args = ["capture-pane", "-p"]
        if include_colors:
            args.append("-e")
        # -E is always "-": explicit end offsets are unreliable
        args.extend(["-t", pane_id, "-S", tmux_start, "-E", "-"])

        text = await self._capture_text(args)
        captured = _strip_trailing_empty_lines(text.split("\n"))
        logger.debug("capture %s: %d lines", pane_id, len(captured))
        return slice_captured(captured, count, start, end)

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _capture_text(self, args: list[str]) -> str:
        """Run the capture; read-only, so transient spawn failures are retried."""
        return await run_tmux(args, tmux_bin=self.tmux_bin)


class TmuxKeyInjector:
    """Key injector backed by ``tmux send-keys``."""

    def __init__(self, tmux_bin: str = DEFAULT_TMUX_BIN) -> None:
        self.tmux_bin = tmux_bin

    async def send(self, pane_id: str, text: str, enter: bool = True) -> None:
        """Type ``text`` literally, then press Enter if requested."""
        await run_tmux(["send-keys", "-t", pane_id, "-l", text], tmux_bin=self.tmux_bin)
        if enter:
            await run_tmux(["send-keys", "-t", pane_id, "Enter"], tmux_bin=self.tmux_bin)

    async def send_keys(self, pane_id: str, keys: str) -> None:
        """Send a named key as-is, or other text one character at a time.

        Character-wise sending lets TUI programs (less, vim, btop) process
        each keystroke as a separate key event.
        """
        if keys in SPECIAL_KEYS:
            await run_tmux(["send-keys", "-t", pane_id, keys], tmux_bin=self.tmux_bin)
            return
        for ch in keys:
            await run_tmux(["send-keys", "-t", pane_id, "-l", ch], tmux_bin=self.tmux_bin)
