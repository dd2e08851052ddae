"""Configuration — Pydantic models for panetrack settings."""

from __future__ import annotations

import json
import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

from panetrack.shell.dialect import DEFAULT_DIALECT, ShellDialect, normalize_dialect

_TRUTHY = {"1", "true", "yes", "on"}


class ExecutionConfig(BaseModel):
    """Command tracking configuration."""

    default_result_lines: int = Field(
        default=100, description="Trailing lines returned when no slice is requested"
    )
    preview_lines: int = Field(
        default=10, description="Tail lines shown while a command is pending"
    )
    wait_timeout: float = Field(default=10.0, description="Seconds to wait for completion")
    poll_interval: float = Field(default=0.15, description="Seconds between status polls")
    reap_after_minutes: float = Field(
        default=30, description="Age after which finished commands are dropped"
    )


class TmuxConfig(BaseModel):
    """tmux CLI configuration."""

    binary: str = Field(default="tmux", description="tmux executable")
    capture_lines: int = Field(
        default=200, description="Lines captured when no range is requested"
    )


class PanetrackConfig(BaseModel):
    """Top-level panetrack configuration."""

    shell_type: ShellDialect = Field(
        default=DEFAULT_DIALECT,
        description="Default shell dialect (bash, zsh, fish, tclsh)",
    )
    debug: bool = Field(default=False, description="Enable debug logging")
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    tmux: TmuxConfig = Field(default_factory=TmuxConfig)

    @field_validator("shell_type", mode="before")
    @classmethod
    def _normalize_shell_type(cls, value: Any) -> ShellDialect:
        return normalize_dialect(value)

    @classmethod
    def load(cls, config_path: str | None = None) -> PanetrackConfig:
        """Load config from file, env vars, or defaults.

        Priority: env vars > config file > defaults.

        Env vars:
            PANETRACK_SHELL_TYPE     - Default shell dialect
            PANETRACK_TMUX_BIN       - tmux executable
            PANETRACK_WAIT_TIMEOUT   - Completion wait timeout (seconds)
            PANETRACK_POLL_INTERVAL  - Status poll interval (seconds)
            PANETRACK_DEBUG          - Enable debug logging (1/true/yes)
        """
        config_data: dict[str, Any] = {}

        if config_path and os.path.exists(config_path):
            with open(config_path) as f:
                config_data = json.load(f)

        env_shell = os.environ.get("PANETRACK_SHELL_TYPE")
        if env_shell:
            config_data["shell_type"] = env_shell

        env_debug = os.environ.get("PANETRACK_DEBUG")
        if env_debug:
            config_data["debug"] = env_debug.strip().lower() in _TRUTHY

        tmux = config_data.get("tmux", {})
        env_tmux_bin = os.environ.get("PANETRACK_TMUX_BIN")
        if env_tmux_bin:
            tmux["binary"] = env_tmux_bin
        if tmux:
            config_data["tmux"] = tmux

        execution = config_data.get("execution", {})
        env_timeout = os.environ.get("PANETRACK_WAIT_TIMEOUT")
        if env_timeout:
            execution["wait_timeout"] = float(env_timeout)

        env_interval = os.environ.get("PANETRACK_POLL_INTERVAL")
        if env_interval:
            execution["poll_interval"] = float(env_interval)

        if execution:
            config_data["execution"] = execution

        return cls.model_validate(config_data)
