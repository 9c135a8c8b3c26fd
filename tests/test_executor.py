"""
Tests for runner/executor.py.

Covers:
  - plain commands:    real shell success/failure, shell=True, C locale
  - elevated commands: osascript wrapping, escaping, denied dialog
  - failures:          stderr vs exit code, timeout, missing osascript
  - audit:             exactly one entry per call, written before raising
"""

import subprocess

import pytest

from searchfix.auditlog import AuditLog
from searchfix.runner.executor import Command, CommandExecutor, ExecutionError


# ── Plain commands ────────────────────────────────────────────────────────────

class TestPlainCommands:
    def test_successful_command_returns_stripped_stdout(self, audit_log):
        ex = CommandExecutor(audit_log)
        assert ex.execute("echo searchfix_test_output") == "searchfix_test_output"

    def test_failing_command_raises(self, audit_log):
        ex = CommandExecutor(audit_log)
        # `false` is a POSIX command that always exits 1
        with pytest.raises(ExecutionError) as exc:
            ex.execute("false")
        assert exc.value.message == "exit 1"

    def test_stderr_becomes_error_message(self, audit_log, fake_shell):
        fake_shell.responses = {"mdutil": (1, "", "Error: unknown volume\n")}
        ex = CommandExecutor(audit_log)
        with pytest.raises(ExecutionError, match="unknown volume"):
            ex.execute("mdutil -s /nope")

    def test_uses_shell_true_with_string_command(self, audit_log, fake_shell):
        CommandExecutor(audit_log).execute('pgrep -x "Microsoft Outlook" || echo "not running"')
        cmd, kwargs = fake_shell.calls[0]
        assert isinstance(cmd, str)
        assert kwargs.get("shell") is True

    def test_forces_c_locale(self, audit_log, fake_shell):
        CommandExecutor(audit_log).execute("mdutil -s /")
        _, kwargs = fake_shell.calls[0]
        assert kwargs["env"]["LC_ALL"] == "C"
        assert kwargs["env"]["LANG"] == "C"

    def test_timeout_raises_execution_error(self, audit_log, monkeypatch):
        def boom(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))

        monkeypatch.setattr(subprocess, "run", boom)
        ex = CommandExecutor(audit_log, timeout=7)
        with pytest.raises(ExecutionError, match="timed out after 7s"):
            ex.execute("sleep 100")

    def test_empty_command_rejected_without_logging(self, audit_log):
        ex = CommandExecutor(audit_log)
        with pytest.raises(ValueError):
            ex.execute("   ")
        assert audit_log.entries() == []

    def test_run_dispatches_command_object(self, audit_log, fake_shell):
        ex = CommandExecutor(audit_log)
        assert ex.run(Command("echo hi")) == "ok"
        assert fake_shell.calls[0][0] == "echo hi"


# ── Elevated commands ─────────────────────────────────────────────────────────

class TestElevatedCommands:
    def test_wrapped_in_osascript_admin_call(self, audit_log, fake_shell):
        CommandExecutor(audit_log).execute("mdutil -E /", elevated=True)
        cmd, _ = fake_shell.calls[0]
        assert cmd[0] == "osascript"
        assert cmd[1] == "-e"
        assert cmd[2] == 'do shell script "mdutil -E /" with administrator privileges'

    def test_double_quotes_and_backslashes_escaped(self, audit_log, fake_shell):
        CommandExecutor(audit_log).execute('rm -rf "/tmp/a b\\c"', elevated=True)
        script = fake_shell.calls[0][0][2]
        assert 'do shell script "rm -rf \\"/tmp/a b\\\\c\\"" with' in script

    def test_user_cancelled_dialog_raises(self, audit_log, fake_shell):
        fake_shell.responses = {
            "rm -rf": (1, "", "0:23: execution error: User canceled. (-128)\n"),
        }
        ex = CommandExecutor(audit_log)
        with pytest.raises(ExecutionError, match="User canceled"):
            ex.execute("rm -rf /tmp/index", elevated=True)

    def test_missing_osascript_raises(self, audit_log, monkeypatch):
        def missing(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", missing)
        with pytest.raises(ExecutionError, match="osascript not found"):
            CommandExecutor(audit_log).execute("mdutil -E /", elevated=True)


# ── Audit trail ───────────────────────────────────────────────────────────────

class TestAuditTrail:
    def test_success_writes_one_cmd_entry(self, audit_log, fake_shell):
        fake_shell.responses = {"mdutil": (0, "/:\n\tIndexing enabled.\n", "")}
        CommandExecutor(audit_log).execute("mdutil -s /")
        entries = audit_log.entries()
        assert len(entries) == 1
        assert "CMD: mdutil -s /" in entries[0]
        assert "OUT: /:\n\tIndexing enabled." in entries[0]

    def test_failure_writes_one_error_entry_before_raising(self, audit_log, fake_shell):
        fake_shell.responses = {"kickstart": (1, "", "Operation not permitted")}
        with pytest.raises(ExecutionError):
            CommandExecutor(audit_log).execute("launchctl kickstart -k system/x")
        entries = audit_log.entries()
        assert len(entries) == 1
        assert "ERROR: launchctl kickstart -k system/x: Operation not permitted" in entries[0]

    def test_each_call_appends_exactly_one_entry(self, audit_log, fake_shell):
        ex = CommandExecutor(audit_log)
        for i in range(3):
            ex.execute(f"echo {i}")
        assert len(audit_log.entries()) == 3

    def test_unwritable_log_raises_execution_error(self, tmp_path, fake_shell):
        log_dir = tmp_path / "is_a_dir"
        log_dir.mkdir()
        ex = CommandExecutor(AuditLog(log_dir))
        with pytest.raises(ExecutionError, match="Could not write audit log"):
            ex.execute("echo hi")

    def test_on_output_called_on_success_only(self, audit_log, fake_shell):
        seen = []
        fake_shell.responses = {"false": (1, "", "nope")}
        ex = CommandExecutor(audit_log, on_output=lambda c, o: seen.append((c, o)))
        ex.execute("echo hi")
        with pytest.raises(ExecutionError):
            ex.execute("false")
        assert seen == [("echo hi", "ok")]
