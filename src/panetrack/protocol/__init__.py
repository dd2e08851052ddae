"""Command completion protocol — sequencing, marker scanning, records."""

from panetrack.protocol.markers import MarkerBlock, block_output, scan_markers, tail_preview
from panetrack.protocol.record import CommandRecord, CommandStatus
from panetrack.protocol.registry import CommandRegistry
from panetrack.protocol.sequence import SequenceAllocator
from panetrack.protocol.slicing import (
    DEFAULT_RESULT_LINES,
    OutputSlice,
    SliceOptions,
    compute_slice_bounds,
    slice_output,
)
from panetrack.protocol.tracker import RAW_MODE_MESSAGE, CommandTracker
from panetrack.protocol.waiter import wait_for_completion

__all__ = [
    "DEFAULT_RESULT_LINES",
    "RAW_MODE_MESSAGE",
    "CommandRecord",
    "CommandRegistry",
    "CommandStatus",
    "CommandTracker",
    "MarkerBlock",
    "OutputSlice",
    "SequenceAllocator",
    "SliceOptions",
    "block_output",
    "compute_slice_bounds",
    "scan_markers",
    "slice_output",
    "tail_preview",
    "wait_for_completion",
]
