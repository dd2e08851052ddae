"""Wire protocol — broadcasts command lifecycle events.

The tracker publishes events as commands are dispatched and finish; any
number of consumers (a CLI progress printer, a resource-change notifier)
subscribe without the tracker knowing about them.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from typing import Any


class EventType(enum.Enum):
    COMMAND_DISPATCHED = "command_dispatched"
    COMMAND_COMPLETED = "command_completed"
    COMMAND_FAILED = "command_failed"
    COMMANDS_REAPED = "commands_reaped"
    SHELL_CHANGED = "shell_changed"
    HELPER_INSTALLED = "helper_installed"


@dataclass
class WireEvent:
    """An event on the wire."""

    type: EventType
    data: dict[str, Any] = field(default_factory=dict)


class Wire:
    """Async message bus: tracker -> subscribers.

    Single-producer, multi-consumer broadcast.
    """

    def __init__(self) -> None:
        self._subscribers: list[asyncio.Queue[WireEvent | None]] = []
        self._closed: bool = False

    def send(self, event: WireEvent) -> None:
        """Send an event to all subscribers.

        Silently drops events after ``close()`` has been called.
        """
        if self._closed:
            return
        for q in self._subscribers:
            q.put_nowait(event)

    def send_dispatched(
        self, command_id: str, pane_id: str, command: str, seq: int | None
    ) -> None:
        self.send(
            WireEvent(
                type=EventType.COMMAND_DISPATCHED,
                data={
                    "command_id": command_id,
                    "pane_id": pane_id,
                    "command": command,
                    "sequence_number": seq,
                },
            )
        )

    def send_finished(
        self, command_id: str, pane_id: str, exit_code: int | None
    ) -> None:
        """Notify that a command reached a terminal state."""
        self.send(
            WireEvent(
                type=(
                    EventType.COMMAND_COMPLETED
                    if exit_code == 0
                    else EventType.COMMAND_FAILED
                ),
                data={
                    "command_id": command_id,
                    "pane_id": pane_id,
                    "exit_code": exit_code,
                },
            )
        )

    def send_reaped(self, command_ids: list[str]) -> None:
        self.send(
            WireEvent(type=EventType.COMMANDS_REAPED, data={"command_ids": command_ids})
        )

    def send_shell_changed(self, shell_type: str, pane_id: str | None) -> None:
        self.send(
            WireEvent(
                type=EventType.SHELL_CHANGED,
                data={"shell_type": shell_type, "pane_id": pane_id},
            )
        )

    def send_helper_installed(self, pane_id: str) -> None:
        self.send(WireEvent(type=EventType.HELPER_INSTALLED, data={"pane_id": pane_id}))

    def subscribe(self) -> asyncio.Queue[WireEvent | None]:
        """Subscribe to events. Returns a queue to read from."""
        q: asyncio.Queue[WireEvent | None] = asyncio.Queue()
        self._subscribers.append(q)
        return q

    def unsubscribe(self, q: asyncio.Queue) -> None:
        """Unsubscribe from events."""
        if q in self._subscribers:
            self._subscribers.remove(q)

    def close(self) -> None:
        """Signal all subscribers that the wire is closing."""
        self._closed = True
        for q in self._subscribers:
            q.put_nowait(None)
