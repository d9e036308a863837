"""Holding area for entries that arrive before their run's workflow binding.

An invocation can only be materialized once its run is bound to a workflow
(the task has to be registered somewhere). Entries that get ahead of their
run's ``wf-name`` entry wait here, per run, in arrival order, and are handed
back when the binding is ingested.

Thread Safety:
    Guarded by its own lock. The dispatcher drains a run's queue in one
    call, so entries are released exactly once.
"""

from __future__ import annotations

import threading
from collections import deque
from uuid import UUID

from provstore.contracts.entries import ReportEntry


class PendingBuffer:
    """Bounded per-run FIFO of report entries.

    Attributes:
        max_entries: Total capacity across all runs.
    """

    def __init__(self, max_entries: int = 10_000) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._by_run: dict[UUID, deque[ReportEntry]] = {}
        self._size = 0

    def offer(self, entry: ReportEntry) -> bool:
        """Park an entry under its run id.

        Returns:
            False if the buffer is full and the entry was not stored.
        """
        with self._lock:
            if self._size >= self.max_entries:
                return False
            self._by_run.setdefault(entry.run_id, deque()).append(entry)
            self._size += 1
            return True

    def drain(self, run_id: UUID) -> list[ReportEntry]:
        """Remove and return every entry parked for ``run_id``, oldest first."""
        with self._lock:
            queue = self._by_run.pop(run_id, None)
            if queue is None:
                return []
            self._size -= len(queue)
            return list(queue)

    def waiting_runs(self) -> frozenset[UUID]:
        with self._lock:
            return frozenset(self._by_run)

    def __len__(self) -> int:
        with self._lock:
            return self._size
