"""
Command executor — runs one external command and audits it.

Two paths:
  plain     — shell command via subprocess (shell=True so ~, quotes and
              `|| echo …` fallbacks are handled by /bin/sh)
  elevated  — shell command via osascript (native macOS password dialog)

Every call appends exactly one entry to the AuditLog before it returns
or raises, so a run that stops halfway still leaves a trail.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Callable

from searchfix.auditlog import AuditLog


DEFAULT_TIMEOUT = 300


# ── Errors ────────────────────────────────────────────────────────────────────

class SearchFixError(Exception):
    """Base class for searchfix errors."""


class ExecutionError(SearchFixError):
    """An external command failed, timed out, or elevation was refused."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ── Data model ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Command:
    text: str
    elevated: bool = False


# ── Executor ──────────────────────────────────────────────────────────────────

class CommandExecutor:
    """
    Run shell commands and append one audit entry per call.

    Args:
        log:       Where entries go.
        timeout:   Seconds before a command is abandoned.
        on_output: Optional callback(command, output) fired after a
                   successful call. Used by the CLI for --verbose echo.
    """

    def __init__(
        self,
        log: AuditLog,
        timeout: int = DEFAULT_TIMEOUT,
        on_output: Callable[[str, str], None] | None = None,
    ) -> None:
        self.log = log
        self.timeout = timeout
        self.on_output = on_output

    def execute(self, command_text: str, elevated: bool = False) -> str:
        """
        Run command_text and return its stripped stdout.

        Raises ExecutionError with the platform message on any failure.
        Quoting of embedded arguments is the caller's responsibility.
        """
        if not command_text or not command_text.strip():
            raise ValueError("command_text must be a non-empty string")

        try:
            if elevated:
                output = self._run_elevated(command_text)
            else:
                output = self._run_plain(command_text)
        except ExecutionError as e:
            self._audit(self.log.record_error, command_text, e.message)
            raise

        self._audit(self.log.record_output, command_text, output)
        if self.on_output is not None:
            self.on_output(command_text, output)
        return output

    def run(self, command: Command) -> str:
        """Execute a prepared Command."""
        return self.execute(command.text, elevated=command.elevated)

    # ── Internal ──────────────────────────────────────────────────────────────

    def _run_plain(self, command_text: str) -> str:
        # C locale keeps mdutil/launchctl output in English for the log reader
        env = {**os.environ, "LANG": "C", "LC_ALL": "C"}
        try:
            proc = subprocess.run(
                command_text,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
                env=env,
            )
        except subprocess.TimeoutExpired:
            raise ExecutionError(f"Command timed out after {self.timeout}s") from None
        except OSError as e:
            raise ExecutionError(str(e)) from e

        return _check(proc)

    def _run_elevated(self, command_text: str) -> str:
        # Escape for embedding inside an AppleScript string literal
        escaped = command_text.replace("\\", "\\\\").replace('"', '\\"')
        osa_script = f'do shell script "{escaped}" with administrator privileges'

        try:
            proc = subprocess.run(
                ["osascript", "-e", osa_script],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            raise ExecutionError("Timed out waiting for authentication") from None
        except FileNotFoundError:
            raise ExecutionError(
                "osascript not found — cannot run privileged command"
            ) from None
        except OSError as e:
            raise ExecutionError(str(e)) from e

        return _check(proc)

    def _audit(self, write: Callable[[str, str], None], command_text: str, detail: str) -> None:
        try:
            write(command_text, detail)
        except OSError as e:
            raise ExecutionError(f"Could not write audit log {self.log.path}: {e}") from e


def _check(proc: subprocess.CompletedProcess) -> str:
    """Return stdout on exit 0, otherwise raise with stderr (or the exit code)."""
    if proc.returncode == 0:
        return (proc.stdout or "").strip()
    err = (proc.stderr or "").strip()
    raise ExecutionError(err or f"exit {proc.returncode}")
