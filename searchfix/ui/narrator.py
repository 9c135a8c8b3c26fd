"""
RunNarrator — live progress UI for a single run.

Wraps rich.live.Live and follows a RunState via subscribe():

  1. Step lines — printed above as each step starts (scroll naturally)
  2. Live area  — spinner + current message + progress bar

Usage:
    with RunNarrator(console, state) as narrator:
        runner.run("repair")
        runner.wait()
"""

from rich.console import Console, Group
from rich.live import Live
from rich.padding import Padding
from rich.spinner import Spinner
from rich.text import Text

from searchfix.runner.state import RunSnapshot, RunState
from searchfix.ui.progress import render_progress
from searchfix.ui.theme import COLOR_COMMAND, COLOR_DIM, COLOR_TEXT


class RunNarrator:
    """Context manager that renders RunState changes while a run is active."""

    def __init__(self, console: Console, state: RunState) -> None:
        self.console = console
        self.state = state
        self._last_message: str | None = None
        self._unsubscribe = None

        self._live = Live(
            console=console,
            refresh_per_second=12,
            transient=False,
        )

    # ── Context manager ───────────────────────────────────────────────────────

    def __enter__(self) -> "RunNarrator":
        self._live.__enter__()
        self._live.update(self._render(self.state.snapshot()))
        self._unsubscribe = self.state.subscribe(self._on_change)
        return self

    def __exit__(self, *args) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._live.update(Padding(render_progress(self.state.progress), pad=(1, 0, 0, 0)))
        self._live.__exit__(*args)
        self.console.print()

    # ── Public API ────────────────────────────────────────────────────────────

    def echo_command(self, command: str, output: str) -> None:
        """Print a command and its output above the live area (--verbose)."""
        self._live.console.print(Text(f"      $ {command}", style=COLOR_COMMAND))
        for line in output.splitlines():
            if line.strip():
                self._live.console.print(Text(f"        {line.rstrip()}", style=COLOR_DIM))

    def note_cancel_requested(self) -> None:
        self._live.console.print(
            Text("  Cancelling after the current step finishes…", style="bold yellow")
        )

    # ── Internal ──────────────────────────────────────────────────────────────

    def _on_change(self, snap: RunSnapshot) -> None:
        if snap.is_running and snap.message != self._last_message and snap.progress > 0:
            line = Text()
            line.append("  ›  ", style="cyan")
            line.append(snap.message, style=COLOR_TEXT)
            self._live.console.print(line)
        self._last_message = snap.message
        self._live.update(self._render(snap))

    def _render(self, snap: RunSnapshot) -> Group:
        """
        ⠋  Deleting Outlook search index…

          [████████████░░░░░░░░░░] 55%
        """
        spinner = Spinner(
            "dots",
            text=Text(f"  {snap.message}", style=COLOR_DIM),
            style="cyan",
        )
        progress = Padding(render_progress(snap.progress), pad=(1, 0, 0, 0))
        return Group(Padding(spinner, pad=(0, 0, 0, 4)), progress)
