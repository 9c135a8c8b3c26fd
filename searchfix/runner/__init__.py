"""
Run subsystem for searchfix.

Modules:
  executor.py — CommandExecutor: one audited shell / osascript call.
  state.py    — RunState (observable) and CancellationToken.
  tasks.py    — TaskRunner: ordered steps on one worker thread.
  modes.py    — the diagnostic and repair sequences.
  hooks.py    — post-run hook (open the audit log when configured).
"""
