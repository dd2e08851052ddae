"""Command records — one per execution dispatched to a pane."""

from __future__ import annotations

import enum
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from panetrack.protocol.slicing import OutputSlice


class CommandStatus(enum.StrEnum):
    """Lifecycle states for a command record."""

    PENDING = "pending"
    COMPLETED = "completed"  # exit code 0
    ERROR = "error"  # non-zero exit code


@dataclass
class CommandRecord:
    """State of a command typed into a pane.

    ``pending`` records carry only a tail preview in ``result``. Once the
    end sentinel is seen the record becomes ``completed`` or ``error`` for
    good; later queries only re-slice ``output_lines``.
    """

    pane_id: str
    command: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: CommandStatus = CommandStatus.PENDING
    start_time: float = field(default_factory=time.time)
    sequence_number: int | None = None
    raw_mode: bool = False
    exit_code: int | None = None
    result: str | None = None

    # Full output between the markers, echoed command removed
    output_lines: list[str] | None = None

    # Slicing metadata
    truncated: bool = False
    total_lines: int | None = None
    returned_lines: int | None = None
    line_start_index: int | None = None
    line_end_index: int | None = None  # exclusive
    marker_start_lost: bool = False

    @property
    def pending(self) -> bool:
        return self.status is CommandStatus.PENDING

    @property
    def started_at(self) -> str:
        """ISO-8601 creation time in UTC."""
        return datetime.fromtimestamp(self.start_time, tz=timezone.utc).isoformat()

    def age_minutes(self, now: float | None = None) -> float:
        return ((now if now is not None else time.time()) - self.start_time) / 60

    def apply_slice(self, window: OutputSlice) -> None:
        """Expose ``window`` as this record's result."""
        self.result = window.text
        self.returned_lines = len(window.lines)
        self.line_start_index = window.start
        self.line_end_index = window.end
        self.total_lines = window.total
        self.truncated = window.truncated
