"""Tests for panetrack.shell.dialect (wrapping, normalization, Tcl helper)."""

from __future__ import annotations

import pytest

from panetrack.shell.dialect import (
    DEFAULT_DIALECT,
    END_PREFIX,
    START_PREFIX,
    SUPPORTED_DIALECTS,
    TCL_HELPER_DEFINITION,
    ShellDialect,
    build_tcl_invocation,
    end_marker,
    needs_helper,
    normalize_dialect,
    start_marker,
    wrap_command,
)


# ---------------------------------------------------------------------------
# ShellDialect / normalize_dialect
# ---------------------------------------------------------------------------


class TestNormalizeDialect:
    def test_all_variants_exist(self) -> None:
        assert {d.value for d in ShellDialect} == {"bash", "zsh", "fish", "tclsh"}

    def test_supported_order_starts_with_bash(self) -> None:
        assert SUPPORTED_DIALECTS[0] is ShellDialect.BASH
        assert DEFAULT_DIALECT is ShellDialect.BASH

    @pytest.mark.parametrize("name", ["bash", "zsh", "fish", "tclsh"])
    def test_known_names(self, name: str) -> None:
        assert normalize_dialect(name) == ShellDialect(name)

    def test_case_and_whitespace_ignored(self) -> None:
        assert normalize_dialect("  FISH ") is ShellDialect.FISH

    def test_unknown_falls_back_to_bash(self) -> None:
        assert normalize_dialect("powershell") is ShellDialect.BASH

    def test_none_falls_back_to_bash(self) -> None:
        assert normalize_dialect(None) is ShellDialect.BASH

    def test_enum_passes_through(self) -> None:
        assert normalize_dialect(ShellDialect.ZSH) is ShellDialect.ZSH


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------


class TestMarkers:
    def test_prefixes(self) -> None:
        assert START_PREFIX == "TMUX_MCP_START"
        assert END_PREFIX == "TMUX_MCP_DONE"

    def test_start_marker(self) -> None:
        assert start_marker(7) == "TMUX_MCP_START_7"

    def test_end_marker(self) -> None:
        assert end_marker(127, 7) == "TMUX_MCP_DONE_127_7"


# ---------------------------------------------------------------------------
# wrap_command
# ---------------------------------------------------------------------------


class TestWrapCommand:
    def test_bash(self) -> None:
        assert wrap_command("ls -la", ShellDialect.BASH, 1) == (
            'echo "TMUX_MCP_START_1"; ls -la; echo "TMUX_MCP_DONE_$?_1"'
        )

    def test_zsh_matches_bash(self) -> None:
        assert wrap_command("pwd", "zsh", 3) == wrap_command("pwd", "bash", 3)

    def test_fish_brace_groups_status(self) -> None:
        wrapped = wrap_command("ls", ShellDialect.FISH, 4)
        assert wrapped == 'echo "TMUX_MCP_START_4"; ls; echo "TMUX_MCP_DONE_"{$status}"_4"'
        # A bare $status_4 would be read by fish as a variable named status_4
        assert "$status_" not in wrapped

    def test_tclsh_uses_helper(self) -> None:
        assert wrap_command("puts hi", ShellDialect.TCLSH, 2) == "::tmux_mcp::run 2 {puts hi}"

    def test_command_text_is_not_quoted(self) -> None:
        wrapped = wrap_command("echo 'a b' | grep \"a\"", "bash", 9)
        assert "echo 'a b' | grep \"a\"" in wrapped

    def test_unknown_dialect_wraps_as_bash(self) -> None:
        assert wrap_command("ls", "nushell", 1) == wrap_command("ls", "bash", 1)

    def test_build_tcl_invocation(self) -> None:
        assert build_tcl_invocation("set x 1", 10) == "::tmux_mcp::run 10 {set x 1}"


# ---------------------------------------------------------------------------
# Tcl helper
# ---------------------------------------------------------------------------


class TestTclHelper:
    def test_single_line(self) -> None:
        assert "\n" not in TCL_HELPER_DEFINITION

    def test_defines_run_in_namespace(self) -> None:
        assert TCL_HELPER_DEFINITION.startswith("namespace eval ::tmux_mcp {")
        assert "proc run {seq cmd}" in TCL_HELPER_DEFINITION

    def test_prints_both_sentinels(self) -> None:
        assert 'puts "TMUX_MCP_START_${seq}"' in TCL_HELPER_DEFINITION
        assert 'puts "TMUX_MCP_DONE_${status}_${seq}"' in TCL_HELPER_DEFINITION

    def test_evaluates_globally_with_catch(self) -> None:
        assert "catch {uplevel #0 $cmd} result opts" in TCL_HELPER_DEFINITION

    def test_normalizes_error_status(self) -> None:
        assert "if {$status != 0} { set status 1 }" in TCL_HELPER_DEFINITION

    def test_flushes_output(self) -> None:
        assert TCL_HELPER_DEFINITION.count("flush stdout") >= 3

    def test_balanced_braces(self) -> None:
        assert TCL_HELPER_DEFINITION.count("{") == TCL_HELPER_DEFINITION.count("}")

    def test_needs_helper(self) -> None:
        assert needs_helper(ShellDialect.TCLSH)
        assert needs_helper("tclsh")
        assert not needs_helper(ShellDialect.BASH)
        assert not needs_helper("fish")
