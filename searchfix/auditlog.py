"""
Audit log — append-only record of every command searchfix runs.

One plain-text file, opened and closed per write, never rotated or
truncated. Entry shapes:

    [2026-10-18T14:02:11] CMD: mdutil -s /
    OUT: /:
        Indexing enabled.

    [2026-10-18T14:02:15] ERROR: rm -rf …: User canceled. (-128)
"""

import re
from datetime import datetime
from pathlib import Path

from searchfix.system_info import DEFAULT_LOG_PATH


# ── Constants ────────────────────────────────────────────────────────────────

_ENTRY_START = re.compile(r"^\[\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\] (CMD|ERROR): ")


# ── Public API ───────────────────────────────────────────────────────────────

class AuditLog:
    """Append-only log sink shared by every CommandExecutor call."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_LOG_PATH

    def record_output(self, command: str, output: str) -> None:
        """Append a successful command and its captured output."""
        self._append(f"[{_timestamp()}] CMD: {command}\nOUT: {output}\n")

    def record_error(self, command: str, message: str) -> None:
        """Append a failed command and the platform-provided error message."""
        self._append(f"[{_timestamp()}] ERROR: {command}: {message}\n")

    def entries(self) -> list[str]:
        """
        Return every entry in the file, oldest first.

        Multi-line output stays attached to the entry that produced it.
        A missing file yields an empty list.
        """
        try:
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return []

        entries: list[str] = []
        for line in text.splitlines(keepends=True):
            if _ENTRY_START.match(line) or not entries:
                entries.append(line)
            else:
                entries[-1] += line
        return entries

    def tail(self, count: int) -> list[str]:
        """Return the newest `count` entries."""
        if count <= 0:
            return []
        return self.entries()[-count:]

    # ── Internal ─────────────────────────────────────────────────────────────

    def _append(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(text)


def _timestamp() -> str:
    return datetime.now().isoformat(timespec="seconds")
