"""
searchfix — entry point.

CLI commands, run wiring (log → executor → runner → narrator), Ctrl-C
cancellation and the end-of-run summary.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from searchfix import __version__
from searchfix.auditlog import AuditLog
from searchfix.config import load_config
from searchfix.runner.executor import CommandExecutor
from searchfix.runner.hooks import open_log, post_run_hook
from searchfix.runner.modes import DIAGNOSTIC, REPAIR, build_modes
from searchfix.runner.state import RunOutcome, RunSnapshot, RunState
from searchfix.runner.tasks import RunMode, TaskRunner
from searchfix.ui.narrator import RunNarrator
from searchfix.ui.theme import (
    APP_TAGLINE,
    COLOR_BRAND,
    COLOR_COMMAND,
    COLOR_DIM,
    COLOR_TEXT,
    ICON_LOCK,
    OUTCOME_ICONS,
    OUTCOME_STYLES,
    SEARCHFIX_THEME,
)


# ── Console (shared across the tool) ─────────────────────────────────────────

console = Console(theme=SEARCHFIX_THEME)


# ── Exit codes ───────────────────────────────────────────────────────────────

EXIT_FAILED = 1
EXIT_CANCELLED = 130


# ── CLI ───────────────────────────────────────────────────────────────────────

@click.group(name="searchfix", context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", prog_name="searchfix")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/searchfix/config.toml).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]) -> None:
    """Diagnose and repair a stuck Outlook / Spotlight search index.

    \b
    Every command searchfix runs is appended to an audit log:
      ~/Library/Logs/searchfix/searchfix.log
    """
    ctx.obj = load_config(config_path)


def _run_options(fn):
    """Options shared by `diagnose` and `repair`."""
    fn = click.option(
        "--dry-run",
        is_flag=True,
        default=False,
        help="List the steps and commands without running anything.",
    )(fn)
    fn = click.option(
        "--open-log/--no-open-log",
        "open_log_flag",
        default=None,
        help="Open the audit log when the run completes (overrides config).",
    )(fn)
    fn = click.option(
        "--verbose/--quiet",
        "verbose",
        default=None,
        help="Echo every command and its output (overrides config).",
    )(fn)
    return fn


@cli.command()
@_run_options
@click.pass_obj
def diagnose(config: dict, verbose: Optional[bool], open_log_flag: Optional[bool], dry_run: bool) -> None:
    """Read-only checks: Outlook, index service, indexing flag, feature mode."""
    _run_mode(DIAGNOSTIC, config, verbose, open_log_flag, dry_run)


@cli.command()
@_run_options
@click.option("--yes", "-y", is_flag=True, default=False,
              help="Skip the confirmation prompt before the index is deleted.")
@click.pass_obj
def repair(
    config: dict,
    verbose: Optional[bool],
    open_log_flag: Optional[bool],
    dry_run: bool,
    yes: bool,
) -> None:
    """Quit Outlook, delete and rebuild the search index, relaunch Outlook."""
    if not dry_run and config["confirm_before_delete"] and not yes:
        if not _confirm_repair():
            console.print("\n  [dim]Repair cancelled. Nothing was changed.[/dim]\n")
            return
    _run_mode(REPAIR, config, verbose, open_log_flag, dry_run)


@cli.command(name="log")
@click.option("--tail", "tail", type=int, default=10, show_default=True,
              help="Number of recent entries to show.")
@click.option("--open", "open_", is_flag=True, default=False,
              help="Open the log in the default viewer instead of printing it.")
@click.option("--path", "path_only", is_flag=True, default=False,
              help="Print only the log file path.")
@click.pass_obj
def log_cmd(config: dict, tail: int, open_: bool, path_only: bool) -> None:
    """Show recent audit log entries."""
    log = AuditLog(config["log_path"])

    if path_only:
        click.echo(str(log.path))
        return

    if open_:
        if not open_log(log.path):
            console.print(f"[red]Error:[/red] could not open {log.path}")
            raise SystemExit(EXIT_FAILED)
        return

    entries = log.tail(tail)
    if not entries:
        console.print(f"  [dim]No entries yet in {log.path}[/dim]")
        return

    console.print(f"  [dim]{log.path}[/dim]\n")
    for entry in entries:
        style = "critical" if "] ERROR: " in entry.split("\n", 1)[0] else "text"
        console.print(Text(entry.rstrip("\n"), style=style))


# ── Run wiring ────────────────────────────────────────────────────────────────

def _run_mode(
    mode_name: str,
    config: dict,
    verbose: Optional[bool],
    open_log_flag: Optional[bool],
    dry_run: bool,
) -> None:
    modes = build_modes()

    if dry_run:
        _print_plan(modes[mode_name])
        return

    settings = dict(config)
    if verbose is not None:
        settings["verbose_logging"] = verbose
    if open_log_flag is not None:
        settings["auto_open_log"] = open_log_flag

    log = AuditLog(settings["log_path"])
    state = RunState()
    executor = CommandExecutor(log)
    runner = TaskRunner(
        executor,
        state,
        modes,
        on_complete=post_run_hook(settings, log.path),
    )

    _print_header(modes[mode_name])

    with RunNarrator(console, state) as narrator:
        if settings["verbose_logging"]:
            executor.on_output = narrator.echo_command
        runner.run(mode_name)
        outcome = _wait_for(runner, narrator)

    snap = state.snapshot()
    _print_summary(snap, log.path)

    if outcome is RunOutcome.FAILED:
        raise SystemExit(EXIT_FAILED)
    if outcome is RunOutcome.CANCELLED:
        raise SystemExit(EXIT_CANCELLED)


def _wait_for(runner: TaskRunner, narrator: RunNarrator) -> Optional[RunOutcome]:
    """
    Poll the worker so Ctrl-C lands on the main thread.

    Ctrl-C requests cancellation; the command already running is left
    to finish and the run stops at the next step boundary.
    """
    while runner.is_running:
        try:
            runner.wait(timeout=0.2)
        except KeyboardInterrupt:
            if runner.cancel():
                narrator.note_cancel_requested()
    return runner.wait()


def _confirm_repair() -> bool:
    """Arrow-key confirmation before the destructive repair sequence."""
    from simple_term_menu import TerminalMenu

    console.print()
    console.print(
        Panel(
            Text(
                "\n  Repair quits Outlook, deletes its Spotlight search index and\n"
                "  forces macOS to rebuild it. Search results will be incomplete\n"
                "  until reindexing finishes (minutes to hours).\n\n"
                f"  {ICON_LOCK}  You will be asked for an administrator password.\n",
                style=COLOR_TEXT,
            ),
            title="[bold]Repair search index[/bold]",
            title_align="left",
            border_style="yellow",
        )
    )
    console.print("  [bold]Continue?[/bold]")
    menu = TerminalMenu(
        ["No, cancel", "Yes, repair"],
        menu_cursor="› ",
        menu_cursor_style=("fg_cyan", "bold"),
        menu_highlight_style=("fg_cyan", "bold"),
        cursor_index=0,
    )
    return menu.show() == 1


# ── Output helpers ────────────────────────────────────────────────────────────

def _print_header(mode: RunMode) -> None:
    t = Text()
    t.append("\n  searchfix", style=f"bold {COLOR_BRAND}")
    t.append(f"  ·  {APP_TAGLINE}\n", style=COLOR_DIM)
    t.append(f"  Running {mode.name} — {len(mode.steps)} steps", style=COLOR_TEXT)
    t.append("   ·   Ctrl-C to cancel\n", style=COLOR_DIM)
    console.print(t)


def _print_plan(mode: RunMode) -> None:
    """Dry run: show each step's progress mark, label and command."""
    body = Text()
    body.append("\n")
    for step in mode.steps:
        body.append(f"  {round(step.fraction * 100):>3}%  ", style=COLOR_DIM)
        body.append(f"{step.label}\n", style=COLOR_TEXT)
        for command in step.commands:
            body.append(f"        $ {command.text}", style=COLOR_COMMAND)
            if command.elevated:
                body.append(f"  {ICON_LOCK}", style=COLOR_DIM)
            body.append("\n")
    body.append("\n  [DRY RUN] Nothing was executed.\n", style="bold yellow")

    console.print()
    console.print(
        Panel(body, title=f"[bold]{mode.name}[/bold]", title_align="left",
              border_style=COLOR_BRAND)
    )
    console.print()


def _print_summary(snap: RunSnapshot, log_path: Path) -> None:
    outcome = snap.outcome.value if snap.outcome else "failed"
    icon = OUTCOME_ICONS.get(outcome, "?")
    style = OUTCOME_STYLES.get(outcome)

    body = Text()
    body.append(f"\n  {icon}  {snap.message}", style=str(style))
    if snap.error:
        body.append(f"\n\n  {snap.error}", style=COLOR_DIM)
    body.append("\n\n  Audit log  ", style=COLOR_DIM)
    body.append(f"{log_path}\n", style=COLOR_COMMAND)

    border = "bright_green" if outcome == "completed" else "yellow" if outcome == "cancelled" else "red"

    console.print(
        Panel(body, title=f"[bold]{snap.mode or 'run'} {outcome}[/bold]",
              title_align="left", border_style=border)
    )
    console.print()


# ── Entry ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    cli()
