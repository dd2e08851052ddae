"""Sequence allocator — pairing numbers for wrapped commands."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class SequenceAllocator:
    """Hands out strictly increasing, gap-free sequence numbers.

    A number is reserved while the caller dispatches the wrapped command
    and committed only if dispatch succeeds. The lock is held for the whole
    reservation, so sends happen in the same order as allocation:

        async with allocator.reserve() as seq:
            await injector.send(pane_id, wrap_command(cmd, dialect, seq))
    """

    def __init__(self, start: int = 0) -> None:
        self._current = start
        self._lock = asyncio.Lock()

    @property
    def current(self) -> int:
        """The last committed sequence number (0 before the first command)."""
        return self._current

    def advance_to(self, seq: int) -> None:
        """Move past ``seq`` so later reservations never reuse it.

        Never moves backwards.
        """
        if seq > self._current:
            logger.debug("Advancing sequence from %d to %d", self._current, seq)
            self._current = seq

    @asynccontextmanager
    async def reserve(self) -> AsyncIterator[int]:
        async with self._lock:
            seq = self._current + 1
            yield seq
            # Only reached when the body did not raise
            self._current = seq
            logger.debug("Committed sequence number %d", seq)
