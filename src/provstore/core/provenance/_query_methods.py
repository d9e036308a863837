# src/provstore/core/provenance/_query_methods.py
"""Read-only query methods for ProvenanceStore."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from provstore.contracts.records import InvocationRecord, StoreSummary

if TYPE_CHECKING:
    from uuid import UUID

    from provstore.core.provenance.entities import EntityStore
    from provstore.core.provenance.pending import PendingBuffer


class QueryMethodsMixin:
    """Read-only query methods. Mixed into ProvenanceStore.

    Every method returns a snapshot: frozensets, or fresh lists of frozen
    records in creation order. Unknown ids and names yield None or an empty
    result, never an exception.
    """

    # Shared state annotations (set by ProvenanceStore.__init__)
    _entities: EntityStore
    _pending: PendingBuffer

    def host_names(self) -> frozenset[str]:
        """Every host that has executed an invocation."""
        return self._entities.host_names()

    def all_entries(self) -> list[InvocationRecord]:
        """Every invocation record ever created."""
        return self._select(None, None)

    def entries_for_task(self, task_id: int) -> list[InvocationRecord]:
        return self._select(frozenset((task_id,)), None)

    def entries_for_tasks(self, task_ids: Iterable[int]) -> list[InvocationRecord]:
        return self._select(frozenset(task_ids), None)

    def entries_since(self, since_timestamp: int) -> list[InvocationRecord]:
        """Invocations created strictly after ``since_timestamp``."""
        return self._select(None, since_timestamp)

    def entries_for_task_since(self, task_id: int, since_timestamp: int) -> list[InvocationRecord]:
        return self._select(frozenset((task_id,)), since_timestamp)

    def entries_for_tasks_since(self, task_ids: Iterable[int], since_timestamp: int) -> list[InvocationRecord]:
        """Invocations of any of ``task_ids`` created strictly after ``since_timestamp``."""
        return self._select(frozenset(task_ids), since_timestamp)

    def task_ids_for_workflow(self, workflow_name: str) -> frozenset[int] | None:
        """Task ids bound to a workflow.

        Returns:
            The task id set (empty for a workflow with a bound run but no
            invocations yet), or None if no run was ever bound to the name.
        """
        return self._entities.task_ids_for_workflow(workflow_name)

    def task_name(self, task_id: int) -> str | None:
        return self._entities.task_name(task_id)

    def invocation(self, invoc_id: int) -> InvocationRecord | None:
        return self._entities.get_invocation(invoc_id)

    def workflow_names(self) -> frozenset[str]:
        return self._entities.workflow_names()

    def workflow_for_run(self, run_id: UUID) -> str | None:
        return self._entities.workflow_for_run(run_id)

    def pending_count(self) -> int:
        """Entries parked until their run's workflow binding arrives."""
        return len(self._pending)

    def summary(self) -> StoreSummary:
        return self._entities.summary(pending_entries=len(self._pending))

    def _select(self, task_ids: frozenset[int] | None, since_timestamp: int | None) -> list[InvocationRecord]:
        """Filter invocations by task id set and/or strict lower timestamp bound.

        None disables the corresponding filter.
        """
        return [
            record
            for record in self._entities.invocations()
            if (task_ids is None or record.task_id in task_ids)
            and (since_timestamp is None or record.timestamp > since_timestamp)
        ]
