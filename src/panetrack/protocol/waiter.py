"""Completion waiter — poll a command until it leaves the pending state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from panetrack.protocol.record import CommandRecord

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_INTERVAL = 0.15


async def wait_for_completion(
    check: Callable[[], Awaitable[CommandRecord | None]],
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = DEFAULT_INTERVAL,
) -> CommandRecord | None:
    """Poll ``check`` until the record finishes or ``timeout`` elapses.

    Running out of time is not an error: the still-pending record is
    returned as-is.

    Args:
        check: Refreshes and returns the record (None if unknown).
        timeout: Maximum seconds to wait.
        interval: Seconds to sleep between checks.

    Returns:
        The final or latest record, or None for an unknown command.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    record = await check()
    while record is not None and record.pending:
        remaining = deadline - loop.time()
        if remaining <= 0:
            logger.debug("Timed out after %.2fs waiting for %s", timeout, record.id)
            break
        await asyncio.sleep(min(interval, remaining))
        record = await check()
    return record
