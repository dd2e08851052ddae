"""Shell configuration — default dialect, per-pane overrides, helper state."""

from __future__ import annotations

import logging

from panetrack.shell.dialect import DEFAULT_DIALECT, ShellDialect, normalize_dialect

logger = logging.getLogger(__name__)


class ShellConfig:
    """Tracks which shell dialect each pane speaks.

    Also remembers the panes where the Tcl helper procedure has already
    been installed. That marker is dropped whenever the pane's active
    dialect may have changed, so a later switch back to ``tclsh``
    reinstalls the helper instead of assuming it is still defined.
    """

    def __init__(self, default: str | ShellDialect = DEFAULT_DIALECT) -> None:
        self._default: ShellDialect = normalize_dialect(default)
        self._overrides: dict[str, ShellDialect] = {}
        self._helper_panes: set[str] = set()

    @property
    def default(self) -> ShellDialect:
        return self._default

    @property
    def overrides(self) -> dict[str, ShellDialect]:
        return dict(self._overrides)

    def set(self, shell_type: str | ShellDialect, pane_id: str | None = None) -> ShellDialect:
        """Set the default dialect, or the override for one pane.

        Returns:
            The normalized dialect that was stored.
        """
        dialect = normalize_dialect(shell_type)

        if pane_id:
            self._overrides[pane_id] = dialect
            self._helper_panes.discard(pane_id)
            logger.debug("Shell override for pane %s set to %s", pane_id, dialect)
            return dialect

        if dialect != self._default:
            # Panes without an override follow the default
            stale = {p for p in self._helper_panes if p not in self._overrides}
            self._helper_panes -= stale
        self._default = dialect
        logger.debug("Default shell set to %s", dialect)
        return dialect

    def clear(self, pane_id: str) -> None:
        """Remove a pane's override so it follows the default again."""
        self._overrides.pop(pane_id, None)
        self._helper_panes.discard(pane_id)

    def resolve(self, pane_id: str) -> ShellDialect:
        """The dialect currently active for ``pane_id``."""
        return self._overrides.get(pane_id, self._default)

    def helper_installed(self, pane_id: str) -> bool:
        return pane_id in self._helper_panes

    def mark_helper_installed(self, pane_id: str) -> None:
        self._helper_panes.add(pane_id)
