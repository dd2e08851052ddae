"""Output slicing — bound command output before it is exposed.

Slicing always works on the cached full output of a command, so it can be
re-run with different windows without capturing the pane again.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

DEFAULT_RESULT_LINES = 100


class SliceOptions(BaseModel):
    """Which part of a command's output to return.

    Precedence: ``start``/``end`` first, then ``lines``, then the default
    trailing window.
    """

    lines: int | None = Field(default=None, description="Return only the last N lines")
    start: int | None = Field(default=None, description="0-based start line")
    end: int | None = Field(default=None, description="0-based end line (inclusive)")

    @property
    def is_empty(self) -> bool:
        return self.lines is None and self.start is None and self.end is None


@dataclass
class OutputSlice:
    """A window over a command's output lines."""

    lines: list[str]
    start: int
    end: int  # exclusive
    total: int
    truncated: bool

    @property
    def text(self) -> str:
        return "\n".join(self.lines).strip()


def compute_slice_bounds(
    total: int,
    options: SliceOptions | None = None,
    default_limit: int | None = None,
) -> tuple[int, int]:
    """Compute ``(start, end_exclusive)`` for ``total`` lines.

    Args:
        total: Number of output lines.
        options: Requested window, if any.
        default_limit: Trailing window used when no option is set.
    """
    start, end = 0, total

    if options is not None and (options.start is not None or options.end is not None):
        if options.start is not None:
            start = min(total, max(0, options.start))
        if options.end is not None:
            end = min(total, max(0, options.end + 1))
    elif options is not None and options.lines is not None:
        start = max(0, total - max(0, options.lines))
    elif default_limit is not None and total > default_limit:
        start = total - default_limit

    if end < start:
        end = start
    return start, end


def slice_output(
    lines: list[str],
    options: SliceOptions | None = None,
    default_limit: int = DEFAULT_RESULT_LINES,
    start_inferred: bool = False,
) -> OutputSlice:
    """Slice ``lines`` according to ``options``.

    The default trailing window only applies when no option is given.
    ``truncated`` is set when the window is shorter than the output or when
    the command's start marker had to be inferred (leading context may be
    missing).
    """
    limit = default_limit if options is None or options.is_empty else None
    start, end = compute_slice_bounds(len(lines), options, limit)
    window = lines[start:end]
    return OutputSlice(
        lines=window,
        start=start,
        end=end,
        total=len(lines),
        truncated=len(window) < len(lines) or start_inferred,
    )
