"""Collaborator interfaces consumed by the command tracker."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

# Key names sent to tmux as-is instead of character by character
SPECIAL_KEYS: frozenset[str] = frozenset(
    [
        "Up",
        "Down",
        "Left",
        "Right",
        "Escape",
        "Tab",
        "Enter",
        "Space",
        "BSpace",
        "Delete",
        "Home",
        "End",
        "PageUp",
        "PageDown",
        *(f"F{n}" for n in range(1, 13)),
    ]
)


@runtime_checkable
class PaneContentSource(Protocol):
    """Returns the current text of a pane."""

    async def capture(
        self,
        pane_id: str,
        lines: int | None = None,
        start: int | str | None = None,
        end: int | str | None = None,
        include_colors: bool = False,
    ) -> list[str]:
        """Capture pane lines.

        ``lines=0`` requests the whole scrollback. The source may return
        more or fewer lines than asked for; callers re-slice.
        """
        ...


@runtime_checkable
class KeyInjector(Protocol):
    """Types into a pane as if from the keyboard."""

    async def send(self, pane_id: str, text: str, enter: bool = True) -> None:
        """Send literal text, optionally followed by Enter."""
        ...

    async def send_keys(self, pane_id: str, keys: str) -> None:
        """Send a named key as-is, or any other text character by character."""
        ...
