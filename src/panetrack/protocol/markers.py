"""Marker scanner — rebuild sentinel blocks from a pane snapshot.

The pane buffer is not append-only: old lines fall out of the history
limit and content shifts as the viewport scrolls. Blocks are therefore
recomputed from scratch on every status check instead of being tracked
incrementally.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from panetrack.shell.dialect import END_PREFIX, START_PREFIX

logger = logging.getLogger(__name__)

PREVIEW_LINES = 10
NO_RECENT_OUTPUT = "(no recent output)"

_START_RE = re.compile(rf"^{re.escape(START_PREFIX)}_(\d+)$")
_END_RE = re.compile(rf"^{re.escape(END_PREFIX)}_(\d+)_(\d+)$")


@dataclass
class MarkerBlock:
    """Start/end sentinel positions for one sequence number."""

    seq: int
    start_line: int | None = None
    end_line: int = -1
    exit_code: int = -1
    start_inferred: bool = False

    @property
    def finished(self) -> bool:
        return self.end_line >= 0


def scan_markers(lines: list[str]) -> dict[int, MarkerBlock]:
    """Find and pair all sentinel lines in ``lines``.

    An end marker whose start marker is missing (scrolled out of history)
    still closes its block: the start is taken as the line after the
    previous end marker, or the top of the snapshot if none precedes it.

    Returns:
        Mapping of sequence number to its block.
    """
    blocks: dict[int, MarkerBlock] = {}
    last_end = -1

    for i, raw in enumerate(lines):
        line = raw.strip()

        match = _START_RE.match(line)
        if match:
            seq = int(match.group(1))
            block = blocks.setdefault(seq, MarkerBlock(seq=seq))
            block.start_line = i
            block.start_inferred = False
            logger.debug("start marker found: seq=%d line=%d", seq, i)
            continue

        match = _END_RE.match(line)
        if match:
            exit_code = int(match.group(1))
            seq = int(match.group(2))
            block = blocks.setdefault(seq, MarkerBlock(seq=seq))
            block.end_line = i
            block.exit_code = exit_code
            if block.start_line is None:
                block.start_line = last_end + 1
                block.start_inferred = True
            last_end = i
            logger.debug(
                "end marker found: seq=%d exit=%d line=%d", seq, exit_code, i
            )

    logger.debug("blocks summary: %s", list(blocks.values()))
    return blocks


def block_output(lines: list[str], block: MarkerBlock) -> list[str]:
    """Lines strictly between a finished block's start and end markers."""
    if block.start_line is None:
        first = 0
    elif block.start_inferred and block.start_line == 0:
        # Inferred at the very top: line 0 is output, not a boundary
        first = 0
    else:
        first = block.start_line + 1
    return list(lines[first : block.end_line])


def tail_preview(lines: list[str], n: int = PREVIEW_LINES) -> str:
    """Short, non-authoritative preview of the last ``n`` lines."""
    tail = "\n".join(lines[-n:]).strip() if n > 0 else ""
    return tail or NO_RECENT_OUTPUT
