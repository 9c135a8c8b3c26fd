"""
Observable run state and the per-run cancellation token.

RunState is owned by one TaskRunner and handed to whoever wants to watch
it (the CLI narrator, tests). Observers either poll snapshot() or
subscribe() to receive a RunSnapshot on every change. Only the runner
mutates it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable


class RunOutcome(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class RunSnapshot:
    message: str = "Ready."
    progress: float = 0.0
    is_running: bool = False
    cancelled: bool = False
    mode: str | None = None
    outcome: RunOutcome | None = None
    error: str | None = None


Subscriber = Callable[[RunSnapshot], None]


class RunState:
    """
    Single mutable state object observed by the presentation layer.

    The lock only guards the snapshot swap. Subscribers are called after
    it is released, on the thread that made the change, so a subscriber
    may call back into the runner (e.g. cancel()).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = RunSnapshot()
        self._subscribers: list[Subscriber] = []

    # ── Observers ─────────────────────────────────────────────────────────────

    def snapshot(self) -> RunSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def message(self) -> str:
        return self.snapshot().message

    @property
    def progress(self) -> float:
        return self.snapshot().progress

    @property
    def is_running(self) -> bool:
        return self.snapshot().is_running

    @property
    def cancelled(self) -> bool:
        return self.snapshot().cancelled

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # ── Mutation (TaskRunner only) ────────────────────────────────────────────

    def update(self, **changes) -> RunSnapshot:
        """Apply field changes atomically and notify subscribers."""
        with self._lock:
            self._snapshot = replace(self._snapshot, **changes)
            snap = self._snapshot
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(snap)
        return snap


class CancellationToken:
    """Advisory cancel flag, polled by the runner at step boundaries."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
