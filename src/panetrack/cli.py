"""CLI entry point for panetrack."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass

import typer

from panetrack.config import PanetrackConfig
from panetrack.protocol.registry import CommandRegistry
from panetrack.protocol.slicing import SliceOptions
from panetrack.protocol.tracker import CommandTracker
from panetrack.session.wire import EventType, Wire
from panetrack.shell.config import ShellConfig
from panetrack.shell.dialect import normalize_dialect
from panetrack.tmux.exceptions import TmuxError
from panetrack.tmux.pane import TmuxKeyInjector, TmuxPaneSource
from panetrack.tool.builtin import create_command_tools, format_record
from panetrack.tool.registry import ToolRegistry

__version__ = "0.1.0"

# Tools that read records created by an earlier execute-command
_RECORD_LOOKUP_TOOLS = frozenset(
    {"get-command-result", "wait-command-completion", "grep-command-output", "list-commands"}
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="panetrack",
    help="Run commands in tmux panes and track their completion and output.",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    # stderr, so captured pane output on stdout stays clean
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


@dataclass
class TrackerSetup:
    """Everything a command needs to talk to tmux."""

    tracker: CommandTracker
    tool_registry: ToolRegistry
    wire: Wire


def _build_tracker(config: PanetrackConfig) -> TrackerSetup:
    """Wire up tracker, tools and event bus from ``config``."""
    wire = Wire()
    tracker = CommandTracker(
        source=TmuxPaneSource(
            tmux_bin=config.tmux.binary, default_lines=config.tmux.capture_lines
        ),
        injector=TmuxKeyInjector(tmux_bin=config.tmux.binary),
        shell_config=ShellConfig(config.shell_type),
        registry=CommandRegistry(
            default_result_lines=config.execution.default_result_lines,
            preview_lines=config.execution.preview_lines,
        ),
        wire=wire,
        wait_timeout=config.execution.wait_timeout,
        poll_interval=config.execution.poll_interval,
        reap_after_minutes=config.execution.reap_after_minutes,
    )
    tool_registry = ToolRegistry()
    tool_registry.register_many(create_command_tools(tracker))
    return TrackerSetup(tracker=tracker, tool_registry=tool_registry, wire=wire)


def _load_config(
    config_file: str | None, verbose: bool, shell: str | None = None
) -> PanetrackConfig:
    config = PanetrackConfig.load(config_file)
    if shell:
        config = config.model_copy(update={"shell_type": normalize_dialect(shell)})
    setup_logging(verbose or config.debug)
    return config


async def _consume_wire(wire: Wire) -> None:
    """Echo lifecycle events to stderr."""
    queue = wire.subscribe()
    while True:
        event = await queue.get()
        if event is None:
            break
        d = event.data
        if event.type == EventType.COMMAND_DISPATCHED:
            seq = d.get("sequence_number")
            suffix = f" (seq {seq})" if seq is not None else " (raw)"
            typer.echo(f"> {d['pane_id']}: {d['command']}{suffix}", err=True)
        elif event.type == EventType.HELPER_INSTALLED:
            typer.echo(f"> {d['pane_id']}: Tcl helper installed", err=True)
        elif event.type in (EventType.COMMAND_COMPLETED, EventType.COMMAND_FAILED):
            typer.echo(f"< exit {d['exit_code']}", err=True)
    wire.unsubscribe(queue)


async def _run_exec(
    setup: TrackerSetup,
    pane: str,
    command: str,
    raw: bool,
    no_enter: bool,
    timeout: float | None,
    interval: float | None,
    options: SliceOptions,
) -> int:
    tracker = setup.tracker
    consumer_task = asyncio.create_task(_consume_wire(setup.wire))
    # Let the consumer subscribe before the first event goes out
    await asyncio.sleep(0)

    try:
        command_id = await tracker.execute(pane, command, raw_mode=raw, no_enter=no_enter)
        if raw or no_enter:
            typer.echo(f"Command ID: {command_id}")
            typer.echo(f"Status tracking is disabled; use `panetrack capture {pane}`.")
            return 0

        record = await tracker.wait(command_id, timeout=timeout, interval=interval, options=options)
    finally:
        setup.wire.close()
        await consumer_task

    if record is None:
        typer.echo(f"Command not found: {command_id}", err=True)
        return 1

    typer.echo(format_record(record))
    if record.pending:
        return 124
    return record.exit_code or 0


@app.command("exec")
def exec_command(
    pane: str = typer.Argument(help="Target pane (e.g. %3 or session:window.pane)."),
    command: str = typer.Argument(help="Command to type into the pane."),
    timeout: float | None = typer.Option(
        None, "--timeout", "-t", help="Seconds to wait for completion."
    ),
    interval: float | None = typer.Option(
        None, "--interval", help="Seconds between status polls."
    ),
    lines: int | None = typer.Option(
        None, "--lines", "-n", help="Return only the last N output lines."
    ),
    start: int | None = typer.Option(None, "--start", help="First output line (0-based)."),
    end: int | None = typer.Option(
        None, "--end", help="Last output line (0-based, inclusive)."
    ),
    raw: bool = typer.Option(
        False, "--raw", help="Send without completion markers (REPLs, editors)."
    ),
    no_enter: bool = typer.Option(
        False, "--no-enter", help="Send keystrokes without Enter. Implies --raw."
    ),
    shell: str | None = typer.Option(
        None, "--shell", "-s", help="Shell dialect: bash, zsh, fish or tclsh."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Run a command in a pane, wait for it, and print its output.

    The exit status mirrors the command's; 124 means it was still running
    when the timeout expired.
    """
    config = _load_config(config_file, verbose, shell)
    setup = _build_tracker(config)
    options = SliceOptions(lines=lines, start=start, end=end)

    try:
        code = asyncio.run(
            _run_exec(setup, pane, command, raw, no_enter, timeout, interval, options)
        )
    except TmuxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    raise typer.Exit(code)


@app.command()
def capture(
    pane: str = typer.Argument(help="Target pane."),
    lines: int | None = typer.Option(
        None, "--lines", "-n", help="Trailing lines to capture (0 = whole history)."
    ),
    start: str | None = typer.Option(None, "--start", help="Start line offset."),
    end: str | None = typer.Option(None, "--end", help="End line offset (inclusive)."),
    colors: bool = typer.Option(False, "--colors", help="Keep ANSI color sequences."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Print the current content of a pane."""
    config = _load_config(config_file, verbose)
    setup = _build_tracker(config)

    try:
        text = asyncio.run(
            setup.tracker.capture(
                pane, lines=lines, start=start, end=end, include_colors=colors
            )
        )
    except TmuxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(text)


@app.command()
def call(
    tool: str = typer.Argument(help="Tool name (see `panetrack tools`)."),
    arguments: str = typer.Argument("{}", help="Tool arguments as a JSON object."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Invoke a single tool by name and print its result.

    Command records live only as long as this process, so tools that look
    up a command id from an earlier call are refused. Use `exec` to run a
    command and read its result in one go.
    """
    if tool in _RECORD_LOOKUP_TOOLS:
        typer.echo(
            f"Error: {tool} needs a command id from this process; "
            "use `panetrack exec` instead.",
            err=True,
        )
        raise typer.Exit(2)

    config = _load_config(config_file, verbose)
    setup = _build_tracker(config)

    try:
        parsed = json.loads(arguments)
    except json.JSONDecodeError as e:
        typer.echo(f"Error: arguments are not valid JSON: {e}", err=True)
        raise typer.Exit(2)

    content, is_error = asyncio.run(setup.tool_registry.dispatch(tool, parsed))
    typer.echo(content, err=is_error)
    if is_error:
        raise typer.Exit(1)


@app.command()
def tools() -> None:
    """Print the tool specifications as JSON."""
    setup = _build_tracker(PanetrackConfig())
    typer.echo(json.dumps(setup.tool_registry.get_specs(), indent=2))


@app.command()
def version() -> None:
    """Print the panetrack version."""
    typer.echo(f"panetrack v{__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
