# src/provstore/core/provenance/store.py
"""ProvenanceStore: the single data-access object for workflow execution logs.

The execution layer only appends (ingest); scheduling and analysis only read
(the query methods). One store lives for one workflow-run session: the
owning component constructs it, feeds it entries and drops it. Nothing is
persisted; replaying the entry stream rebuilds the same state.

Implementation is split across mixins:
- _ingestion.py: IngestionMixin (report entry -> entity mutations)
- _query_methods.py: QueryMethodsMixin (read-only projections)
"""

from __future__ import annotations

from provstore.contracts.enums import PendingPolicy
from provstore.core.config import IngestionSettings
from provstore.core.diagnostics import ErrorSink, LoggingErrorSink
from provstore.core.provenance._ingestion import IngestionMixin
from provstore.core.provenance._query_methods import QueryMethodsMixin
from provstore.core.provenance.entities import EntityStore
from provstore.core.provenance.pending import PendingBuffer


class ProvenanceStore(IngestionMixin, QueryMethodsMixin):
    """In-memory provenance store.

    Example:
        store = ProvenanceStore()
        store.ingest(ReportEntry(timestamp=1, run_id=run, key="wf-name", value="wf-A"))
        store.ingest(ReportEntry(
            timestamp=2, run_id=run, invoc_id=100, task_id=1, task_name="align",
            key="invoc-host", value="node7",
        ))
        store.host_names()            # frozenset({"node7"})
        store.task_ids_for_workflow("wf-A")  # frozenset({1})
    """

    def __init__(
        self,
        *,
        error_sink: ErrorSink | None = None,
        pending_policy: PendingPolicy = PendingPolicy.BUFFER,
        max_pending_entries: int = 10_000,
    ) -> None:
        """Create an empty store.

        Args:
            error_sink: Receives ingestion errors (default: structured log warnings)
            pending_policy: Handling of invocation entries that precede their
                run's workflow binding
            max_pending_entries: Capacity of the pending buffer
        """
        self._entities = EntityStore()
        self._pending = PendingBuffer(max_pending_entries)
        self._pending_policy = pending_policy
        self._error_sink: ErrorSink = error_sink if error_sink is not None else LoggingErrorSink()

    @classmethod
    def from_settings(cls, settings: IngestionSettings, *, error_sink: ErrorSink | None = None) -> ProvenanceStore:
        return cls(
            error_sink=error_sink,
            pending_policy=settings.pending_policy,
            max_pending_entries=settings.max_pending_entries,
        )
