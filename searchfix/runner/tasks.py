"""
Sequenced task runner.

Runs one RunMode at a time on a dedicated worker thread:

  Idle → Running → {Completed, Cancelled, Failed} → Idle

Steps run strictly in order. The cancellation token is checked before
and after every step, so a cancel stops the *next* step from starting;
a command already in flight always runs to completion.

Progress is advanced to a step's declared fraction just before that
step runs. The bar shows what is about to happen, not what is done.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Mapping

from searchfix.runner.executor import Command, CommandExecutor, ExecutionError
from searchfix.runner.state import CancellationToken, RunOutcome, RunState


TERMINATED_MESSAGE = "Cancelled or failed."


# ── Data model ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Step:
    label: str                      # "Checking index service status…"
    fraction: float                 # progress shown while this step runs
    commands: tuple[Command, ...]

    def perform(self, executor: CommandExecutor, token: CancellationToken) -> None:
        """
        Run this step's commands in order.

        The token is accepted but not polled here; cancellation granularity
        is the step boundary.
        """
        for command in self.commands:
            executor.run(command)


@dataclass(frozen=True)
class RunMode:
    name: str
    steps: tuple[Step, ...]
    completion_message: str


class _Cancelled(Exception):
    pass


# ── Runner ────────────────────────────────────────────────────────────────────

class TaskRunner:
    """
    Execute run modes against a CommandExecutor, publishing to a RunState.

    Args:
        executor:    Runs (and audits) each command.
        state:       Observable state; mutated only by this runner.
        modes:       Mode name → RunMode.
        on_complete: Post-run hook, called with the mode name after a
                     run completes (never after cancel/failure).
    """

    def __init__(
        self,
        executor: CommandExecutor,
        state: RunState,
        modes: Mapping[str, RunMode],
        on_complete: Callable[[str], None] | None = None,
    ) -> None:
        self.executor = executor
        self.state = state
        self.modes = modes
        self.on_complete = on_complete

        self._lock = threading.Lock()
        self._token: CancellationToken | None = None
        self._thread: threading.Thread | None = None
        self._outcome: RunOutcome | None = None

    # ── Public API ────────────────────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    def run(self, mode: str) -> bool:
        """
        Start `mode` on the worker thread.

        Returns False (and does nothing) if a run is already active.
        Raises ValueError for an unknown mode name.
        """
        with self._lock:
            if self.state.is_running:
                return False

            run_mode = self.modes.get(mode)
            if run_mode is None:
                raise ValueError(f"Unknown run mode: {mode!r}")

            token = CancellationToken()
            self._token = token
            self._outcome = None
            self.state.update(
                message="Starting…",
                progress=0.0,
                is_running=True,
                cancelled=False,
                mode=run_mode.name,
                outcome=None,
                error=None,
            )
            self._thread = threading.Thread(
                target=self._work,
                args=(run_mode, token),
                name=f"searchfix-{run_mode.name}",
                daemon=True,
            )
            self._thread.start()
        return True

    def cancel(self) -> bool:
        """Request cooperative cancellation. No effect when idle."""
        token = self._token
        if token is None or not self.state.is_running:
            return False
        token.cancel()
        self.state.update(cancelled=True)
        return True

    def wait(self, timeout: float | None = None) -> RunOutcome | None:
        """Block until the current run ends; None on timeout or if never run."""
        thread = self._thread
        if thread is None:
            return None
        thread.join(timeout)
        if thread.is_alive():
            return None
        return self._outcome

    # ── Worker ────────────────────────────────────────────────────────────────

    def _work(self, mode: RunMode, token: CancellationToken) -> None:
        try:
            self._outcome = self._execute(mode, token)
            if self._outcome is RunOutcome.COMPLETED and self.on_complete is not None:
                self.on_complete(mode.name)
        finally:
            self.state.update(is_running=False)

    def _execute(self, mode: RunMode, token: CancellationToken) -> RunOutcome:
        try:
            for step in mode.steps:
                _check_cancelled(token)
                self.state.update(message=step.label, progress=step.fraction)
                step.perform(self.executor, token)
                _check_cancelled(token)

        except _Cancelled:
            self.state.update(message=TERMINATED_MESSAGE, outcome=RunOutcome.CANCELLED)
            return RunOutcome.CANCELLED

        except ExecutionError as e:
            self.state.update(
                message=TERMINATED_MESSAGE, outcome=RunOutcome.FAILED, error=e.message,
            )
            return RunOutcome.FAILED

        # Safety net: a bug in a step must never leave the runner stuck
        except Exception as e:
            self.state.update(
                message=TERMINATED_MESSAGE,
                outcome=RunOutcome.FAILED,
                error=f"Unexpected error: {e}",
            )
            return RunOutcome.FAILED

        self.state.update(message=mode.completion_message, outcome=RunOutcome.COMPLETED)
        return RunOutcome.COMPLETED


def _check_cancelled(token: CancellationToken) -> None:
    if token.cancelled:
        raise _Cancelled()
