"""Task timing: a per-run ledger of step durations and the timer that fills it.

One ``TimingLedger`` is created per pipeline run and handed to every task.
Entries are kept in insertion order, which is also execution order because
the pipeline runs its steps strictly one after another.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from dataclasses import dataclass


class TimerError(RuntimeError):
    """Raised when a ``Timer`` is stopped without having been started."""


@dataclass(frozen=True)
class TimingEntry:
    """One completed task in the ledger.

    ``started_at`` and ``finished_at`` are ``time.monotonic()`` readings and
    are only meaningful relative to each other.
    """

    name: str
    duration_ms: int
    started_at: float
    finished_at: float


class TimingLedger:
    """Append-only mapping of task name to duration in milliseconds."""

    def __init__(self) -> None:
        self._entries: dict[str, TimingEntry] = {}

    def record(
        self,
        name: str,
        duration_ms: int,
        started_at: float = 0.0,
        finished_at: float = 0.0,
    ) -> TimingEntry:
        """Add a completed task.

        Raises:
            ValueError: If *name* is already recorded or the duration is
                negative.
        """
        if name in self._entries:
            raise ValueError(f"Task '{name}' already has a recorded duration")
        if duration_ms < 0:
            raise ValueError(f"Duration for '{name}' must be non-negative, got {duration_ms}")
        entry = TimingEntry(
            name=name,
            duration_ms=duration_ms,
            started_at=started_at,
            finished_at=finished_at,
        )
        self._entries[name] = entry
        return entry

    def entries(self) -> list[TimingEntry]:
        """Return all entries in the order they were recorded."""
        return list(self._entries.values())

    def as_dict(self) -> dict[str, int]:
        """Return a plain ``{task: duration_ms}`` mapping."""
        return {name: entry.duration_ms for name, entry in self._entries.items()}

    @property
    def total_ms(self) -> int:
        """Sum of all recorded task durations."""
        return sum(entry.duration_ms for entry in self._entries.values())

    def __getitem__(self, name: str) -> int:
        return self._entries[name].duration_ms

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class Timer:
    """Measures one named unit of work and records it in a ledger.

    Usage::

        timer = Timer("Git Initialization", ledger)
        timer.start()
        ...
        elapsed_ms = timer.stop()
    """

    def __init__(self, name: str, ledger: TimingLedger) -> None:
        self.name = name
        self.ledger = ledger
        self._started_at: float | None = None

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        """Record the reference instant."""
        self._started_at = time.monotonic()

    def stop(self) -> int:
        """Return elapsed milliseconds since ``start()`` and record them.

        Raises:
            TimerError: If ``start()`` was never called, or the timer was
                already stopped.
        """
        if self._started_at is None:
            raise TimerError(f"Timer '{self.name}' was stopped before it was started")
        finished_at = time.monotonic()
        elapsed_ms = max(0, round((finished_at - self._started_at) * 1000))
        self.ledger.record(self.name, elapsed_ms, self._started_at, finished_at)
        self._started_at = None
        return elapsed_ms
