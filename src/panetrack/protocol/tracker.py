"""Command tracker — run commands in panes and recover their results.

The tracker owns every piece of protocol state (records, sequence counter,
shell configuration, Tcl helper bookkeeping), so independent trackers never
share anything. It talks to tmux only through a pane content source and a
key injector.
"""

from __future__ import annotations

import asyncio
import logging

from panetrack.protocol.markers import scan_markers
from panetrack.protocol.record import CommandRecord
from panetrack.protocol.registry import DEFAULT_MAX_AGE_MINUTES, CommandRegistry
from panetrack.protocol.sequence import SequenceAllocator
from panetrack.protocol.slicing import SliceOptions
from panetrack.protocol.waiter import (
    DEFAULT_INTERVAL,
    DEFAULT_TIMEOUT,
    wait_for_completion,
)
from panetrack.session.wire import Wire
from panetrack.shell.config import ShellConfig
from panetrack.shell.dialect import (
    TCL_HELPER_DEFINITION,
    ShellDialect,
    needs_helper,
    wrap_command,
)
from panetrack.tmux.base import KeyInjector, PaneContentSource

logger = logging.getLogger(__name__)

RAW_MODE_MESSAGE = (
    "Status tracking unavailable for rawMode commands. "
    "Use capture-pane to monitor interactive apps instead."
)
MINIMAL_READY_MARKER = "MINIMAL_READY"


class CommandTracker:
    """Dispatch commands into panes and track their completion.

    Usage:
        tracker = CommandTracker(TmuxPaneSource(), TmuxKeyInjector())
        command_id = await tracker.execute("%0", "ls -la")
        record = await tracker.wait(command_id, timeout=5)
        print(record.status, record.exit_code, record.result)
    """

    def __init__(
        self,
        source: PaneContentSource,
        injector: KeyInjector,
        shell_config: ShellConfig | None = None,
        registry: CommandRegistry | None = None,
        wire: Wire | None = None,
        wait_timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_INTERVAL,
        reap_after_minutes: float = DEFAULT_MAX_AGE_MINUTES,
    ) -> None:
        self.source = source
        self.injector = injector
        self.shell_config = shell_config if shell_config is not None else ShellConfig()
        self.registry = registry if registry is not None else CommandRegistry()
        self.allocator = SequenceAllocator()
        self.wait_timeout = wait_timeout
        self.poll_interval = poll_interval
        self.reap_after_minutes = reap_after_minutes
        self._wire = wire
        # Panes whose history has been scanned for earlier sequence numbers
        self._seeded_panes: set[str] = set()

    # ------------------------------------------------------------------
    # Shell configuration
    # ------------------------------------------------------------------

    def set_shell_type(self, shell_type: str, pane_id: str | None = None) -> ShellDialect:
        """Set the default shell dialect, or one pane's override."""
        dialect = self.shell_config.set(shell_type, pane_id)
        if self._wire:
            self._wire.send_shell_changed(dialect.value, pane_id)
        return dialect

    def clear_shell_override(self, pane_id: str) -> None:
        self.shell_config.clear(pane_id)

    def shell_type_for(self, pane_id: str) -> ShellDialect:
        return self.shell_config.resolve(pane_id)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(
        self,
        pane_id: str,
        command: str,
        raw_mode: bool = False,
        no_enter: bool = False,
    ) -> str:
        """Send ``command`` to ``pane_id`` and start tracking it.

        Args:
            pane_id: Target pane (e.g. ``%3``).
            command: Command text as the user wrote it.
            raw_mode: Send without sentinels (REPLs, interactive apps).
                Such commands stay pending forever.
            no_enter: Send keystrokes without Enter; implies raw mode.

        Returns:
            The new command id.

        Raises:
            TmuxError: The keystrokes could not be delivered. No record
                is created in that case.
        """
        if no_enter or raw_mode:
            if no_enter:
                await self.injector.send_keys(pane_id, command)
            else:
                await self.injector.send(pane_id, command, enter=True)
            record = self.registry.create(pane_id, command, raw_mode=True)
            self._notify_dispatched(record)
            return record.id

        dialect = self.shell_config.resolve(pane_id)
        await self._seed_sequence(pane_id)
        async with self.allocator.reserve() as seq:
            if needs_helper(dialect):
                await self._ensure_helper(pane_id)
            wrapped = wrap_command(command, dialect, seq)
            logger.debug(
                "execute: pane=%s dialect=%s seq=%d sending %r",
                pane_id,
                dialect,
                seq,
                wrapped,
            )
            await self.injector.send(pane_id, wrapped, enter=True)
            record = self.registry.create(pane_id, command, sequence_number=seq)

        self._notify_dispatched(record)
        return record.id

    async def _seed_sequence(self, pane_id: str) -> None:
        """Skip sequence numbers already present in ``pane_id``'s history.

        Markers left by an earlier tracker (a previous CLI run, say) would
        otherwise pair with this tracker's first commands and report their
        stale results.
        """
        if pane_id in self._seeded_panes:
            return
        snapshot = await self.source.capture(pane_id, lines=0)
        blocks = scan_markers(snapshot)
        if blocks:
            highest = max(blocks)
            logger.debug("Pane %s already holds markers up to seq %d", pane_id, highest)
            self.allocator.advance_to(highest)
        self._seeded_panes.add(pane_id)

    async def _ensure_helper(self, pane_id: str) -> None:
        """Install the Tcl helper procedure in ``pane_id`` once."""
        if self.shell_config.helper_installed(pane_id):
            return
        logger.debug("Installing Tcl helper in pane %s", pane_id)
        await self.injector.send(pane_id, TCL_HELPER_DEFINITION, enter=True)
        self.shell_config.mark_helper_installed(pane_id)
        if self._wire:
            self._wire.send_helper_installed(pane_id)

    def _notify_dispatched(self, record: CommandRecord) -> None:
        if self._wire:
            self._wire.send_dispatched(
                record.id, record.pane_id, record.command, record.sequence_number
            )

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    async def check_status(
        self, command_id: str, options: SliceOptions | None = None
    ) -> CommandRecord | None:
        """Refresh a command's status from the pane.

        Finished commands are only re-sliced. Pending ones trigger a full
        scrollback capture and a marker scan.

        Returns:
            The record, or None if ``command_id`` is unknown.
        """
        record = self.registry.get(command_id)
        if record is None:
            return None

        if not record.pending:
            return self.registry.reslice(command_id, options)

        if record.raw_mode:
            record.result = RAW_MODE_MESSAGE
            return record

        # Whole scrollback, so markers of long commands are not missed
        snapshot = await self.source.capture(record.pane_id, lines=0)
        logger.debug(
            "check_status %s: captured %d lines", command_id, len(snapshot)
        )
        record = self.registry.resolve(command_id, snapshot, options)
        if record is not None and not record.pending and self._wire:
            self._wire.send_finished(record.id, record.pane_id, record.exit_code)
        return record

    async def wait(
        self,
        command_id: str,
        timeout: float | None = None,
        interval: float | None = None,
        options: SliceOptions | None = None,
    ) -> CommandRecord | None:
        """Poll until the command finishes or ``timeout`` seconds pass."""
        return await wait_for_completion(
            lambda: self.check_status(command_id, options),
            timeout=self.wait_timeout if timeout is None else timeout,
            interval=self.poll_interval if interval is None else interval,
        )

    def get(self, command_id: str) -> CommandRecord | None:
        return self.registry.get(command_id)

    def active_ids(self) -> list[str]:
        return self.registry.active_ids()

    def output(self, command_id: str, options: SliceOptions | None = None) -> str | None:
        return self.registry.output(command_id, options)

    def grep(self, command_id: str, pattern: str, flags: str = "") -> list[str]:
        return self.registry.grep(command_id, pattern, flags)

    def reap(self, max_age_minutes: float | None = None) -> list[str]:
        if max_age_minutes is None:
            max_age_minutes = self.reap_after_minutes
        removed = self.registry.reap(max_age_minutes)
        if removed and self._wire:
            self._wire.send_reaped(removed)
        return removed

    # ------------------------------------------------------------------
    # Pane helpers
    # ------------------------------------------------------------------

    async def capture(
        self,
        pane_id: str,
        lines: int | None = None,
        start: int | str | None = None,
        end: int | str | None = None,
        include_colors: bool = False,
    ) -> str:
        """Capture pane content as text."""
        captured = await self.source.capture(
            pane_id, lines=lines, start=start, end=end, include_colors=include_colors
        )
        return "\n".join(captured)

    async def switch_to_minimal_shell(
        self, pane_id: str, attempts: int = 20, delay: float = 0.1
    ) -> bool:
        """Replace the pane's bash with one that skips profile and rc files.

        Only implemented for bash panes.

        Returns:
            True once the readiness marker shows up in the pane.
        """
        if self.shell_config.resolve(pane_id) is not ShellDialect.BASH:
            return False

        await self.injector.send(pane_id, "exec bash --noprofile --norc", enter=True)
        await self.injector.send(pane_id, f"echo {MINIMAL_READY_MARKER}", enter=True)

        for _ in range(attempts):
            tail = await self.source.capture(pane_id, lines=50)
            # The echoed "echo MINIMAL_READY" line does not count
            if any(line.strip() == MINIMAL_READY_MARKER for line in tail):
                logger.debug("Minimal shell ready in pane %s", pane_id)
                return True
            await asyncio.sleep(delay)

        logger.warning("Timed out waiting for minimal shell in pane %s", pane_id)
        return False
