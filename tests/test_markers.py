"""Tests for panetrack.protocol.markers (scan_markers, block_output, tail_preview)."""

from __future__ import annotations

from panetrack.protocol.markers import (
    NO_RECENT_OUTPUT,
    MarkerBlock,
    block_output,
    scan_markers,
    tail_preview,
)


# ---------------------------------------------------------------------------
# scan_markers
# ---------------------------------------------------------------------------


class TestScanMarkers:
    def test_empty_snapshot(self) -> None:
        assert scan_markers([]) == {}

    def test_complete_block(self) -> None:
        lines = ["$ prompt", "TMUX_MCP_START_1", "hello", "TMUX_MCP_DONE_0_1", "$"]
        blocks = scan_markers(lines)
        assert blocks == {
            1: MarkerBlock(seq=1, start_line=1, end_line=3, exit_code=0)
        }
        assert blocks[1].finished

    def test_start_without_end(self) -> None:
        blocks = scan_markers(["TMUX_MCP_START_2", "working..."])
        assert blocks[2].start_line == 0
        assert not blocks[2].finished
        assert blocks[2].exit_code == -1

    def test_nonzero_exit_code(self) -> None:
        blocks = scan_markers(["TMUX_MCP_START_5", "TMUX_MCP_DONE_127_5"])
        assert blocks[5].exit_code == 127

    def test_surrounding_whitespace_tolerated(self) -> None:
        blocks = scan_markers(["  TMUX_MCP_START_1  ", "\tTMUX_MCP_DONE_0_1 "])
        assert blocks[1].finished

    def test_echoed_wrapper_is_not_a_marker(self) -> None:
        echo = 'echo "TMUX_MCP_START_1"; ls; echo "TMUX_MCP_DONE_$?_1"'
        assert scan_markers([echo]) == {}

    def test_marker_with_trailing_text_ignored(self) -> None:
        assert scan_markers(["TMUX_MCP_START_1 extra"]) == {}

    def test_interleaved_sequences(self) -> None:
        lines = [
            "TMUX_MCP_START_1",
            "a",
            "TMUX_MCP_DONE_0_1",
            "TMUX_MCP_START_2",
            "b",
            "TMUX_MCP_DONE_1_2",
        ]
        blocks = scan_markers(lines)
        assert (blocks[1].start_line, blocks[1].end_line) == (0, 2)
        assert (blocks[2].start_line, blocks[2].end_line, blocks[2].exit_code) == (3, 5, 1)


# ---------------------------------------------------------------------------
# Lost start markers
# ---------------------------------------------------------------------------


class TestInferredStart:
    def test_inferred_at_top(self) -> None:
        blocks = scan_markers(["out 1", "out 2", "TMUX_MCP_DONE_0_3"])
        block = blocks[3]
        assert block.start_line == 0
        assert block.start_inferred
        assert block.finished

    def test_inferred_after_previous_end(self) -> None:
        lines = [
            "TMUX_MCP_START_1",
            "a",
            "TMUX_MCP_DONE_0_1",
            "b",
            "c",
            "TMUX_MCP_DONE_0_2",
        ]
        block = scan_markers(lines)[2]
        assert block.start_line == 3
        assert block.start_inferred

    def test_real_start_not_inferred(self) -> None:
        block = scan_markers(["TMUX_MCP_START_1", "TMUX_MCP_DONE_0_1"])[1]
        assert not block.start_inferred


# ---------------------------------------------------------------------------
# block_output
# ---------------------------------------------------------------------------


class TestBlockOutput:
    def test_strictly_between_markers(self) -> None:
        lines = ["x", "TMUX_MCP_START_1", "a", "b", "TMUX_MCP_DONE_0_1", "y"]
        block = scan_markers(lines)[1]
        assert block_output(lines, block) == ["a", "b"]

    def test_empty_output(self) -> None:
        lines = ["TMUX_MCP_START_1", "TMUX_MCP_DONE_0_1"]
        assert block_output(lines, scan_markers(lines)[1]) == []

    def test_inferred_at_top_keeps_first_line(self) -> None:
        lines = ["first", "second", "TMUX_MCP_DONE_0_4"]
        assert block_output(lines, scan_markers(lines)[4]) == ["first", "second"]

    def test_inferred_after_previous_end_excludes_boundary(self) -> None:
        lines = [
            "TMUX_MCP_START_1",
            "TMUX_MCP_DONE_0_1",
            "boundary",
            "payload",
            "TMUX_MCP_DONE_0_2",
        ]
        # Start inferred at index 2; output is strictly after it
        assert block_output(lines, scan_markers(lines)[2]) == ["payload"]


# ---------------------------------------------------------------------------
# tail_preview
# ---------------------------------------------------------------------------


class TestTailPreview:
    def test_last_lines(self) -> None:
        lines = [f"line {i}" for i in range(20)]
        preview = tail_preview(lines, 3)
        assert preview == "line 17\nline 18\nline 19"

    def test_stripped(self) -> None:
        assert tail_preview(["", "  hi  ", ""]) == "hi"

    def test_empty(self) -> None:
        assert tail_preview([]) == NO_RECENT_OUTPUT
        assert tail_preview(["", "   "]) == NO_RECENT_OUTPUT

    def test_default_is_ten_lines(self) -> None:
        lines = [str(i) for i in range(30)]
        assert tail_preview(lines).split("\n") == [str(i) for i in range(20, 30)]
