"""
Post-run hooks.

Called by TaskRunner after a run completes. Runs outside the
CommandExecutor on purpose: opening the log is not an audited step.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable


def open_log(path: Path) -> bool:
    """
    Open the audit log in the default viewer (Console.app on macOS).

    Returns True on success, False if the file is missing or `open` fails.
    """
    if not path.is_file():
        return False
    try:
        subprocess.run(
            ["open", str(path)],
            check=True,
            timeout=10,
            capture_output=True,
        )
        return True
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
        return False


def post_run_hook(config: dict, log_path: Path) -> Callable[[str], None]:
    """Build the on_complete hook: open the log if auto_open_log is set."""

    def _hook(mode: str) -> None:
        if config.get("auto_open_log"):
            open_log(log_path)

    return _hook
