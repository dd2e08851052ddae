"""Tests for panetrack.config (PanetrackConfig, ExecutionConfig, TmuxConfig)."""

from __future__ import annotations

import json

import pytest

from panetrack.config import ExecutionConfig, PanetrackConfig, TmuxConfig
from panetrack.shell.dialect import ShellDialect

_ENV_VARS = (
    "PANETRACK_SHELL_TYPE",
    "PANETRACK_TMUX_BIN",
    "PANETRACK_WAIT_TIMEOUT",
    "PANETRACK_POLL_INTERVAL",
    "PANETRACK_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_execution_defaults(self) -> None:
        config = ExecutionConfig()
        assert config.default_result_lines == 100
        assert config.preview_lines == 10
        assert config.wait_timeout == 10.0
        assert config.poll_interval == 0.15
        assert config.reap_after_minutes == 30

    def test_tmux_defaults(self) -> None:
        config = TmuxConfig()
        assert config.binary == "tmux"
        assert config.capture_lines == 200

    def test_top_level_defaults(self) -> None:
        config = PanetrackConfig()
        assert config.shell_type is ShellDialect.BASH
        assert not config.debug

    def test_shell_type_normalized(self) -> None:
        assert PanetrackConfig(shell_type="FISH").shell_type is ShellDialect.FISH
        assert PanetrackConfig(shell_type="ksh").shell_type is ShellDialect.BASH


class TestLoad:
    def test_no_file(self) -> None:
        config = PanetrackConfig.load(None)
        assert config == PanetrackConfig()

    def test_missing_file_ignored(self, tmp_path) -> None:
        config = PanetrackConfig.load(str(tmp_path / "nope.json"))
        assert config == PanetrackConfig()

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "panetrack.json"
        path.write_text(
            json.dumps(
                {
                    "shell_type": "zsh",
                    "execution": {"default_result_lines": 50},
                    "tmux": {"capture_lines": 500},
                }
            )
        )
        config = PanetrackConfig.load(str(path))
        assert config.shell_type is ShellDialect.ZSH
        assert config.execution.default_result_lines == 50
        assert config.tmux.capture_lines == 500

    def test_env_overrides_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "panetrack.json"
        path.write_text(json.dumps({"shell_type": "zsh", "tmux": {"binary": "tmux2"}}))
        monkeypatch.setenv("PANETRACK_SHELL_TYPE", "tclsh")
        monkeypatch.setenv("PANETRACK_TMUX_BIN", "/usr/local/bin/tmux")
        monkeypatch.setenv("PANETRACK_WAIT_TIMEOUT", "2.5")
        monkeypatch.setenv("PANETRACK_POLL_INTERVAL", "0.5")
        monkeypatch.setenv("PANETRACK_DEBUG", "1")

        config = PanetrackConfig.load(str(path))
        assert config.shell_type is ShellDialect.TCLSH
        assert config.tmux.binary == "/usr/local/bin/tmux"
        assert config.execution.wait_timeout == 2.5
        assert config.execution.poll_interval == 0.5
        assert config.debug

    def test_debug_false_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PANETRACK_DEBUG", "no")
        assert not PanetrackConfig.load().debug
