"""
Shared pytest fixtures.
"""
import subprocess

import pytest

from searchfix.auditlog import AuditLog


class FakeShell:
    """
    Stand-in for subprocess.run.

    `responses` maps a substring of the command (or of the osascript
    source for elevated calls) to (returncode, stdout, stderr). Anything
    unmatched succeeds with "ok".
    """

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.calls: list = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        text = cmd if isinstance(cmd, str) else " ".join(cmd)
        for needle, (rc, out, err) in self.responses.items():
            if needle in text:
                return subprocess.CompletedProcess(cmd, rc, out, err)
        return subprocess.CompletedProcess(cmd, 0, "ok\n", "")


@pytest.fixture
def audit_log(tmp_path) -> AuditLog:
    return AuditLog(tmp_path / "logs" / "searchfix.log")


@pytest.fixture
def fake_shell(monkeypatch):
    """Patch subprocess.run with a FakeShell; set .responses per test."""
    shell = FakeShell()
    monkeypatch.setattr(subprocess, "run", shell)
    return shell
