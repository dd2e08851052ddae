"""Output bounding — keep tool results small enough for a client to consume."""

from __future__ import annotations

import os
import tempfile

MAX_LINES = 2000
MAX_BYTES = 50 * 1024  # 50KB
OUTPUT_DIR = "~/.panetrack/tool-output"


def truncate_output(
    text: str,
    max_lines: int = MAX_LINES,
    max_bytes: int = MAX_BYTES,
    save_full: bool = True,
) -> str:
    """Bound tool output by line count and byte size.

    The tail is kept, since the end of a pane or command output is where
    prompts and errors show up. When anything is dropped the full text is
    optionally written to ``OUTPUT_DIR`` and the notice names the file.

    Args:
        text: Raw tool output.
        max_lines: Maximum number of lines to keep.
        max_bytes: Maximum bytes to keep.
        save_full: Whether to save the full output when truncating.

    Returns:
        ``text`` unchanged, or a notice line followed by the kept tail.
    """
    if not text:
        return text

    lines = text.split("\n")
    byte_count = len(text.encode("utf-8", errors="replace"))
    if len(lines) <= max_lines and byte_count <= max_bytes:
        return text

    full_path = _save_full_output(text) if save_full else None

    skipped_lines = max(0, len(lines) - max_lines)
    kept = "\n".join(lines[skipped_lines:])

    skipped_bytes = 0
    kept_bytes = kept.encode("utf-8", errors="replace")
    if len(kept_bytes) > max_bytes:
        # Cut from the front on a UTF-8 boundary so the tail survives
        kept = kept_bytes[-max_bytes:].decode("utf-8", errors="ignore")
        skipped_bytes = len(kept_bytes) - max_bytes

    parts = []
    if skipped_lines:
        parts.append(f"{skipped_lines} lines skipped")
    if skipped_bytes:
        parts.append(f"{skipped_bytes} bytes skipped")

    notice = (
        f"[Output truncated: {', '.join(parts)}. "
        f"Total: {len(lines)} lines, {byte_count} bytes]"
    )
    if full_path:
        notice += f"\n[Full output saved to: {full_path}]"
    return f"{notice}\n{kept}"


def _save_full_output(text: str) -> str:
    """Write ``text`` to a fresh file under ``OUTPUT_DIR`` and return its path."""
    directory = os.path.expanduser(OUTPUT_DIR)
    os.makedirs(directory, exist_ok=True)
    fd, path = tempfile.mkstemp(prefix="panetrack-", suffix=".txt", dir=directory)
    with os.fdopen(fd, "w") as f:
        f.write(text)
    return path


def sanitize_pane_text(text: str) -> str:
    """Drop control characters a pane capture may carry.

    Keeps tabs, newlines, ANSI escape introducers (ESC) and all printable
    characters, so colored captures (``capture-pane -e``) survive intact.
    """
    cleaned = []
    for ch in text:
        cp = ord(ch)
        if ch in ("\t", "\n", "\x1b"):
            cleaned.append(ch)
        elif cp >= 32 and not 0x7F <= cp < 0xA0 and not 0xFFF9 <= cp < 0xFFFC:
            cleaned.append(ch)
    return "".join(cleaned)
