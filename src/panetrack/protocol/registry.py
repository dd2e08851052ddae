"""Command registry — authoritative store for command records."""

from __future__ import annotations

import logging
import re
import time

from panetrack.errors import CommandNotFoundError, CommandPendingError
from panetrack.protocol.markers import (
    PREVIEW_LINES,
    block_output,
    scan_markers,
    tail_preview,
)
from panetrack.protocol.record import CommandRecord, CommandStatus
from panetrack.protocol.slicing import (
    DEFAULT_RESULT_LINES,
    SliceOptions,
    compute_slice_bounds,
    slice_output,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_MINUTES = 30

_REGEX_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


def _compile_flags(flags: str) -> re.RegexFlag:
    compiled = re.RegexFlag(0)
    for ch in flags or "":
        # Unknown flags (e.g. "g") have no line-matching meaning
        compiled |= _REGEX_FLAGS.get(ch, re.RegexFlag(0))
    return compiled


class CommandRegistry:
    """Tracks in-flight and finished commands.

    Each record moves ``pending -> completed`` or ``pending -> error``
    exactly once, when its end sentinel is found in a pane snapshot.
    Terminal records are never re-resolved; they are only re-sliced.
    """

    def __init__(
        self,
        default_result_lines: int = DEFAULT_RESULT_LINES,
        preview_lines: int = PREVIEW_LINES,
    ) -> None:
        self._records: dict[str, CommandRecord] = {}
        self.default_result_lines = default_result_lines
        self.preview_lines = preview_lines

    def create(
        self,
        pane_id: str,
        command: str,
        sequence_number: int | None = None,
        raw_mode: bool = False,
    ) -> CommandRecord:
        """Register a newly dispatched command as pending."""
        record = CommandRecord(
            pane_id=pane_id,
            command=command,
            sequence_number=sequence_number,
            raw_mode=raw_mode,
        )
        self._records[record.id] = record
        logger.debug(
            "Registered command %s pane=%s seq=%s raw=%s",
            record.id,
            pane_id,
            sequence_number,
            raw_mode,
        )
        return record

    def get(self, command_id: str) -> CommandRecord | None:
        return self._records.get(command_id)

    def active_ids(self) -> list[str]:
        """IDs of every tracked record, oldest first."""
        return list(self._records.keys())

    def resolve(
        self,
        command_id: str,
        snapshot: list[str],
        options: SliceOptions | None = None,
    ) -> CommandRecord | None:
        """Resolve a record against a fresh pane snapshot.

        Args:
            command_id: Record to resolve.
            snapshot: Current pane lines (full scrollback).
            options: Output window for terminal records.

        Returns:
            The updated record, or None for an unknown id.
        """
        record = self._records.get(command_id)
        if record is None:
            return None

        if not record.pending:
            return self.reslice(command_id, options)

        seq = record.sequence_number
        if seq is None:
            record.result = tail_preview(snapshot, self.preview_lines)
            return record

        block = scan_markers(snapshot).get(seq)
        if block is None or not block.finished:
            record.result = tail_preview(snapshot, self.preview_lines)
            logger.debug(
                "Command %s (seq=%d) still pending, preview=%r",
                command_id,
                seq,
                record.result,
            )
            return record

        output = block_output(snapshot, block)
        if output and output[0].strip() == record.command.strip():
            # The shell's local echo of what was typed, not program output
            output = output[1:]

        record.exit_code = block.exit_code
        record.status = (
            CommandStatus.COMPLETED if block.exit_code == 0 else CommandStatus.ERROR
        )
        record.marker_start_lost = block.start_inferred
        record.output_lines = output
        logger.debug(
            "Command %s finished: exit=%d start=%s end=%d start_lost=%s lines=%d",
            command_id,
            block.exit_code,
            block.start_line,
            block.end_line,
            block.start_inferred,
            len(output),
        )
        return self.reslice(command_id, options)

    def reslice(
        self, command_id: str, options: SliceOptions | None = None
    ) -> CommandRecord | None:
        """Re-apply output slicing to a terminal record without capturing."""
        record = self._records.get(command_id)
        if record is None or record.output_lines is None:
            return record

        window = slice_output(
            record.output_lines,
            options,
            default_limit=self.default_result_lines,
            start_inferred=record.marker_start_lost,
        )
        record.apply_slice(window)
        logger.debug(
            "Sliced command %s: returned=%d total=%d truncated=%s slice=%d..%d",
            command_id,
            len(window.lines),
            window.total,
            window.truncated,
            window.start,
            window.end,
        )
        return record

    def output(
        self, command_id: str, options: SliceOptions | None = None
    ) -> str | None:
        """Raw (unstripped) output window, without the default line limit."""
        record = self._records.get(command_id)
        if record is None or record.output_lines is None:
            return None
        start, end = compute_slice_bounds(len(record.output_lines), options)
        return "\n".join(record.output_lines[start:end])

    def grep(self, command_id: str, pattern: str, flags: str = "") -> list[str]:
        """Output lines of a finished command that match ``pattern``.

        Raises:
            CommandNotFoundError: Unknown command id.
            CommandPendingError: The command has not finished yet.
        """
        record = self._records.get(command_id)
        if record is None:
            raise CommandNotFoundError(command_id)
        if record.pending:
            raise CommandPendingError(command_id)
        if not record.output_lines:
            return []

        try:
            compiled = re.compile(pattern, _compile_flags(flags))
        except re.error as e:
            logger.debug("Invalid grep pattern %r: %s", pattern, e)
            return []

        return [line for line in record.output_lines if compiled.search(line)]

    def reap(
        self, max_age_minutes: float = DEFAULT_MAX_AGE_MINUTES, now: float | None = None
    ) -> list[str]:
        """Drop finished records older than ``max_age_minutes``.

        Pending records are kept regardless of age.

        Returns:
            IDs of the removed records.
        """
        now = now if now is not None else time.time()
        removed = [
            rid
            for rid, record in self._records.items()
            if not record.pending and record.age_minutes(now) > max_age_minutes
        ]
        for rid in removed:
            del self._records[rid]
        if removed:
            logger.info("Reaped %d finished command(s)", len(removed))
        return removed

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, command_id: str) -> bool:
        return command_id in self._records
